"""Input surface: field table, company profiles and the live lookup."""

from dcfcalc.inputs.fetcher import CompanyDataFetcher
from dcfcalc.inputs.fetcher import FetchSettings
from dcfcalc.inputs.fields import field_table
from dcfcalc.inputs.fields import FieldSpec
from dcfcalc.inputs.fields import parse_form
from dcfcalc.inputs.fields import update_field
from dcfcalc.inputs.profiles import CompanyProfile
from dcfcalc.inputs.profiles import demo_profile
from dcfcalc.inputs.profiles import Fetched
from dcfcalc.inputs.profiles import LoadStatus
from dcfcalc.inputs.profiles import merge_outcome
from dcfcalc.inputs.profiles import Unavailable

__all__ = [
    'CompanyDataFetcher',
    'CompanyProfile',
    'FetchSettings',
    'Fetched',
    'FieldSpec',
    'LoadStatus',
    'Unavailable',
    'demo_profile',
    'field_table',
    'merge_outcome',
    'parse_form',
    'update_field',
]
