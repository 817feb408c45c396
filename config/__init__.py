# config package: authoritative source for report-artifact configuration.
#
# Sub-modules:
#   domain_registry.py  known domains, display-name variants, ordinals,
#                       data sources, informant flags
#   run_params.py       execution constants: worker pool, failure threshold,
#                       output formats, chart geometry
#
# The packaged score-type lookup artifact lives beside the classifier in
# src/scoring/data/score_type_lookup.csv.
