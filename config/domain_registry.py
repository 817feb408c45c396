"""
Domain registry: the static table of report domains.

This is the AUTHORITATIVE source for domain configuration.
src/domains/registry.py builds immutable DomainConfig objects from here —
do not maintain parallel copies.

Ordinals are fixed two-digit strings.  Artifact paths embed them, so an
ordinal must never be renumbered once a report has been generated with it.
Two entries may share a phenotype key (the child and adult emotion
variants) only if they also share its ordinal.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Domain registry, one entry per logical domain variant
# ---------------------------------------------------------------------------
#
# Fields:
#   display_names     domain labels (as they appear in the `domain` column)
#                     that map to this logical domain
#   phenotype_key     short stable identifier used in artifact names
#   ordinal           two-digit section number
#   data_source       source family the records come from
#                     ('neurocog', 'neurobehav', 'validity')
#   domain_family     drives default score types and informant tables:
#                       'cognitive' / 'academic' → performance tests
#                       'symptom' / 'attention' / 'adaptive' → rating scales
#                       'validity'
#   multi_informant   True when ratings are split by informant
#   age_variant       fixed 'child' / 'adult' variant, or None to infer
#   scale_allowlist   optional collection of scale names to keep
#   plot_title        caption handed to the chart artifact

DOMAIN_REGISTRY: dict[str, dict] = {
    # ── Cognitive domains ────────────────────────────────────────────────
    "iq": {
        "display_names": ["General Cognitive Ability"],
        "phenotype_key": "iq",
        "ordinal": "01",
        "data_source": "neurocog",
        "domain_family": "cognitive",
        "multi_informant": False,
        "age_variant": None,
        "scale_allowlist": None,
        "plot_title": (
            "Intellectual and cognitive abilities represent an individual's "
            "capacity to think, reason, and solve problems."
        ),
    },
    "academics": {
        "display_names": ["Academic Skills"],
        "phenotype_key": "academics",
        "ordinal": "02",
        "data_source": "neurocog",
        "domain_family": "academic",
        "multi_informant": False,
        "age_variant": None,
        "scale_allowlist": None,
        "plot_title": (
            "Academic skills reflect the application of cognitive abilities "
            "to educational tasks."
        ),
    },
    "verbal": {
        "display_names": ["Verbal/Language"],
        "phenotype_key": "verbal",
        "ordinal": "03",
        "data_source": "neurocog",
        "domain_family": "cognitive",
        "multi_informant": False,
        "age_variant": None,
        "scale_allowlist": None,
        "plot_title": (
            "Verbal and language functioning refers to the ability to access "
            "and apply acquired word knowledge."
        ),
    },
    "spatial": {
        "display_names": ["Visual Perception/Construction"],
        "phenotype_key": "spatial",
        "ordinal": "04",
        "data_source": "neurocog",
        "domain_family": "cognitive",
        "multi_informant": False,
        "age_variant": None,
        "scale_allowlist": None,
        "plot_title": (
            "Visuospatial abilities involve perceiving, analyzing, and "
            "mentally manipulating visual information."
        ),
    },
    "memory": {
        "display_names": ["Memory"],
        "phenotype_key": "memory",
        "ordinal": "05",
        "data_source": "neurocog",
        "domain_family": "cognitive",
        "multi_informant": False,
        "age_variant": None,
        "scale_allowlist": None,
        "plot_title": (
            "Memory functions are crucial for learning, daily functioning, "
            "and cognitive processing."
        ),
    },
    "executive": {
        "display_names": ["Attention/Executive"],
        "phenotype_key": "executive",
        "ordinal": "06",
        "data_source": "neurocog",
        "domain_family": "cognitive",
        "multi_informant": False,
        "age_variant": None,
        "scale_allowlist": None,
        "plot_title": (
            "Attentional and executive functions underlie most domains of "
            "cognitive performance."
        ),
    },
    "motor": {
        "display_names": ["Motor"],
        "phenotype_key": "motor",
        "ordinal": "07",
        "data_source": "neurocog",
        "domain_family": "cognitive",
        "multi_informant": False,
        "age_variant": None,
        "scale_allowlist": None,
        "plot_title": (
            "Motor functions involve the planning and execution of voluntary "
            "movements."
        ),
    },
    "social": {
        "display_names": ["Social Cognition"],
        "phenotype_key": "social",
        "ordinal": "08",
        "data_source": "neurocog",
        "domain_family": "cognitive",
        "multi_informant": False,
        "age_variant": None,
        "scale_allowlist": None,
        "plot_title": (
            "Social cognition encompasses the mental processes involved in "
            "perceiving, interpreting, and responding to social information."
        ),
    },
    # ── Behavioral domains (rating scales) ──────────────────────────────
    "adhd": {
        "display_names": ["ADHD"],
        "phenotype_key": "adhd",
        "ordinal": "09",
        "data_source": "neurobehav",
        "domain_family": "attention",
        "multi_informant": True,
        "age_variant": None,             # inferred from instruments
        "scale_allowlist": None,
        "plot_title": (
            "ADHD assessment evaluates attention, hyperactivity, and "
            "impulsivity patterns."
        ),
    },
    "emotion_child": {
        "display_names": [
            "Behavioral/Emotional/Social",
            "Personality Disorders",
            "Psychiatric Disorders",
            "Psychosocial Problems",
            "Substance Use",
        ],
        "phenotype_key": "emotion",
        "ordinal": "10",
        "data_source": "neurobehav",
        "domain_family": "symptom",
        "multi_informant": True,
        "age_variant": "child",
        "scale_allowlist": None,
        "plot_title": (
            "Emotional and behavioral functioning assessment provides "
            "insights into psychological well-being."
        ),
    },
    "emotion_adult": {
        "display_names": [
            "Emotional/Behavioral/Personality",
            "Personality Disorders",
            "Psychiatric Disorders",
            "Psychosocial Problems",
            "Substance Use",
        ],
        "phenotype_key": "emotion",
        "ordinal": "10",
        "data_source": "neurobehav",
        "domain_family": "symptom",
        "multi_informant": True,
        "age_variant": "adult",
        "scale_allowlist": None,
        "plot_title": (
            "Emotional and behavioral functioning assessment provides "
            "insights into psychological well-being."
        ),
    },
    "adaptive": {
        "display_names": ["Adaptive Functioning"],
        "phenotype_key": "adaptive",
        "ordinal": "11",
        "data_source": "neurobehav",
        "domain_family": "adaptive",
        "multi_informant": False,
        "age_variant": None,
        "scale_allowlist": None,
        "plot_title": (
            "Adaptive functioning reflects the practical skills needed for "
            "everyday independence."
        ),
    },
    "daily_living": {
        "display_names": ["Daily Living"],
        "phenotype_key": "daily_living",
        "ordinal": "12",
        "data_source": "neurocog",
        "domain_family": "cognitive",
        "multi_informant": False,
        "age_variant": None,
        "scale_allowlist": None,
        "plot_title": (
            "Daily living skills capture the cognitive demands of routine "
            "activities."
        ),
    },
    # ── Validity ─────────────────────────────────────────────────────────
    "validity": {
        "display_names": ["Performance Validity", "Symptom Validity"],
        "phenotype_key": "validity",
        "ordinal": "13",
        "data_source": "validity",
        "domain_family": "validity",
        "multi_informant": False,
        "age_variant": None,
        "scale_allowlist": None,
        "plot_title": (
            "Validity indicators estimate how well the test results reflect "
            "true ability and symptom status."
        ),
    },
}

# Canonical processing order (section order in the final report)
DOMAIN_ORDER: list[str] = [
    "iq", "academics", "verbal", "spatial", "memory", "executive",
    "motor", "social", "adhd", "emotion_child", "emotion_adult",
    "adaptive", "daily_living", "validity",
]
