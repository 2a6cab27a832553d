from enum import StrEnum
from typing import Optional


class PaymentType(StrEnum):
    """Payment type tokens posted by the registrant form."""

    THIRD_PARTY_PROCESSOR = 'thirdParty'
    INVOICE = 'invoice'


class PaymentBranch(StrEnum):
    NO_PAYMENT = 'no_payment'
    THIRD_PARTY_PROCESSOR = 'third_party_processor'
    INVOICE = 'invoice'
    UNSUPPORTED = 'unsupported'


def resolve_payment_branch(*, is_free_of_charge: bool, payment_type: Optional[str]) -> PaymentBranch:
    """
    Decide how a registration is paid for.

    Free orders never go through a payment step, whatever token was posted.
    """
    if is_free_of_charge:
        return PaymentBranch.NO_PAYMENT
    if payment_type == PaymentType.THIRD_PARTY_PROCESSOR:
        return PaymentBranch.THIRD_PARTY_PROCESSOR
    if payment_type == PaymentType.INVOICE:
        return PaymentBranch.INVOICE
    return PaymentBranch.UNSUPPORTED
