"""
constants.py — shared constants used across the pipeline.

Legal Amazon state codes, the Trajetorias component registry, and the
key-variable taxonomy per component are defined here so every stage reads
the same values.
"""

from __future__ import annotations

from typing import Final, Literal

# ---------------------------------------------------------------------------
# Municipality codes
# ---------------------------------------------------------------------------

# IBGE municipality codes are 7 digits (2-digit state + 4-digit muni + check digit)
ENTITY_CODE_WIDTH: Final[int] = 7

# Marker written into region columns when a row has no reference match
UNKNOWN_REGION: Final[str] = "unknown"

# ---------------------------------------------------------------------------
# Legal Amazon states: abbreviation -> name / IBGE state code
# ---------------------------------------------------------------------------
AMAZON_STATES: Final[dict[str, str]] = {
    "AC": "Acre",
    "AM": "Amazonas",
    "AP": "Amapá",
    "PA": "Pará",
    "RO": "Rondônia",
    "RR": "Roraima",
    "TO": "Tocantins",
    "MT": "Mato Grosso",
    "MA": "Maranhão",
}

AMAZON_STATE_CODES: Final[dict[str, str]] = {
    "AC": "12",
    "AM": "13",
    "AP": "16",
    "PA": "15",
    "RO": "11",
    "RR": "14",
    "TO": "17",
    "MT": "51",
    "MA": "21",
}

# ---------------------------------------------------------------------------
# Trajetorias dataset (Zenodo record 7098053)
# ---------------------------------------------------------------------------

COMPONENT_NAMES: Final[tuple[str, ...]] = (
    "population",
    "socioeconomic",
    "epidemiological",
    "environmental",
)

COMPONENT_FILES: Final[dict[str, str]] = {
    "population": "TRAJETORIAS_DATASET_Population_indicators.csv",
    "socioeconomic": "TRAJETORIAS_DATASET_Socio-Economic_dimension-indicators.csv",
    "epidemiological": "TRAJETORIAS_DATASET_Epidemiological_dimension_indicators.csv",
    "environmental": "TRAJETORIAS_DATASET_Environmental_dimension_indicators.csv",
}

COMPONENT_DESCRIPTIONS: Final[dict[str, str]] = {
    "population": "Population indicators",
    "socioeconomic": "Socio-economic dimension indicators (MPI, income, education)",
    "epidemiological": "Epidemiological dimension indicators (vector-borne disease, health access)",
    "environmental": "Environmental dimension indicators (deforestation, land use, climate)",
}

# Ordered: earlier names claim a matching column first
KEY_VARIABLES: Final[dict[str, tuple[str, ...]]] = {
    "socioeconomic": (
        "mpi_rural",
        "mpi_urban",
        "mpi_general",
        "poverty_incidence",
        "poverty_intensity",
        "income",
        "education",
        "employment",
    ),
    "epidemiological": (
        "malaria",
        "dengue",
        "leishmaniasis",
        "respiratory",
        "diarrhea",
        "health_access",
        "hospital_density",
    ),
    "environmental": (
        "deforestation",
        "forest_cover",
        "agriculture",
        "pasture",
        "urban_area",
        "precipitation",
        "temperature",
        "road_density",
        "mining",
    ),
    "population": (
        "population_density",
        "urban_population",
        "migration",
        "age_structure",
    ),
}

# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------
DEFAULT_USER_AGENT: Final[str] = "Mozilla/5.0 (compatible; TrajetoriasAnalysis/1.0)"

ComponentStatus = Literal["success", "empty", "failed"]
RunStatus = Literal["success", "partial_failure", "failure"]
