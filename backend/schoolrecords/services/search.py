"""
Recherche par sous-chaîne insensible à la casse, identique sur les deux bases.
"""

from typing import Mapping, Union

from sqlalchemy import String, cast, func
from sqlalchemy.orm import InstrumentedAttribute

from schoolrecords.errors import InvalidArgument


def resolve_search_column(
    columns: Mapping[int, InstrumentedAttribute],
    option: Union[int, str],
    entity: str,
) -> InstrumentedAttribute:
    """Traduit l'indice du critère choisi en colonne ; InvalidArgument si hors liste."""
    try:
        return columns[int(option)]
    except (KeyError, TypeError, ValueError):
        raise InvalidArgument(f"Critère de recherche invalide pour {entity} : {option}")


def contains_ignore_case(column: InstrumentedAttribute, term: str):
    # cast : la recherche par identifiant compare aussi une sous-chaîne
    return func.lower(cast(column, String)).contains(term.strip().lower(), autoescape=True)
