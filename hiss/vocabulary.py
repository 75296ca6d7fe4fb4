"""
HISS Backend — Controlled Vocabularies
=======================================

What:  The closed sets of legal values for every categorical feature field.
Why:   Feature records are only persisted when each categorical value is a
       member of its vocabulary; clients use the same lists to populate
       their selection widgets (GET /values).
How:   Ordered tuples, frozen into a read-only mapping at import time.
       Membership is case-sensitive and every vocabulary carries the
       sentinels "unspecified" and "NA".
"""

from types import MappingProxyType
from typing import Dict, FrozenSet, List, Mapping, Tuple

KIND: Tuple[str, ...] = (
    "nothing",
    "subarachnoidal hemorrhage",
    "hemorrhage",
    "hemorrhagic transformation",
    "infarct",
    "unspecified",
    "NA",
)

TEMPORAL: Tuple[str, ...] = (
    "acute",
    "subacute",
    "chronic",
    "unspecified",
    "NA",
)

LOCATIONS: Tuple[str, ...] = (
    "MCA territory",
    "ACA territory",
    "PCA territory",
    "frontal",
    "temporal",
    "parietal",
    "insular",
    "occipital",
    "fronto-temporal",
    "fronto-parietal",
    "temporo-parietal",
    "temporo-occipital",
    "parieto-occipital",
    "capsula interna anterior limb",
    "capsula interna posterior limb",
    "corona radiata",
    "thalamus",
    "nucleus caudatus",
    "putamen",
    "globus pallidus",
    "basal ganglia",
    "mesencephalon",
    "pons",
    "medulla oblongata",
    "brainstem unspecified",
    "cerebellum",
    "unspecified",
    "NA",
)

SIDE: Tuple[str, ...] = (
    "left",
    "right",
    "bilateral",
    "anterior",
    "posterior",
    "central",
    "unspecified",
    "NA",
)

EXTENT: Tuple[str, ...] = (
    "lacunar",
    "lacunar, multiple",
    "small",
    "small, multiple",
    "medium",
    "medium, multiple",
    "large",
    "large, multiple",
    "unspecified",
    "unspecified, multiple",
    "NA",
)

GRADE: Tuple[str, ...] = (
    "none",
    "light",
    "moderate",
    "severe",
    "unspecified",
    "NA",
)

VESSELS: Tuple[str, ...] = (
    "Aorta",
    "ICA",
    "ECA",
    "A1",
    "A2",
    "A3",
    "M1",
    "M2",
    "M3",
    "M4",
    "P1",
    "P2",
    "P3",
    "Vertebral",
    "Basilar",
    "PICA",
    "AICA",
    "SCA",
    "unspecified",
    "NA",
)

VESSEL_FINDINGS: Tuple[str, ...] = (
    "nothing",
    "atheromatosis without stenosis",
    "stenosis <= 50%",
    "stenosis < 70%",
    "stenosis >= 70%",
    "stenosis, unspecified grade",
    "caliber variations",
    "occlusion",
    "thrombosis",
    "dense vessel sign",
    "dissection",
    "unspecified",
    "NA",
)

CORTICAL_ATROPHY_DESCRIPTION: Tuple[str, ...] = (
    "symmetric",
    "right hemisphere predominance",
    "left hemisphere predominance",
    "unspecified",
    "NA",
)

# ── Registry ──────────────────────────────────────────────────────────────
# Keys are the names the front-end already uses for its form widgets.
VOCABULARIES: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "Kind": KIND,
    "Temporal": TEMPORAL,
    "Locations": LOCATIONS,
    "Side": SIDE,
    "Extent": EXTENT,
    "Grade": GRADE,
    "Vessels": VESSELS,
    "VesselFinding": VESSEL_FINDINGS,
    "CorticalAtrophyDescription": CORTICAL_ATROPHY_DESCRIPTION,
})

_MEMBERS: Mapping[str, FrozenSet[str]] = MappingProxyType(
    {name: frozenset(values) for name, values in VOCABULARIES.items()}
)


def contains(vocabulary: str, value: str) -> bool:
    """
    True when `value` is a legal member of the named vocabulary.

    An unknown vocabulary name raises KeyError: record types only consult
    vocabularies declared above, so a miss is a programming error.
    """
    return value in _MEMBERS[vocabulary]


def all_vocabularies() -> Dict[str, List[str]]:
    """Snapshot of every vocabulary, in declaration order, as plain lists."""
    return {name: list(values) for name, values in VOCABULARIES.items()}
