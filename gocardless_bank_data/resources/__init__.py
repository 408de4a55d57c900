"""
Resource groups of the GoCardless Bank Account Data API.
"""

from gocardless_bank_data.resources.accounts import AccountsResource
from gocardless_bank_data.resources.agreements import AgreementsResource
from gocardless_bank_data.resources.institutions import InstitutionsResource
from gocardless_bank_data.resources.requisitions import RequisitionsResource

__all__ = [
    "AccountsResource",
    "AgreementsResource",
    "InstitutionsResource",
    "RequisitionsResource",
]
