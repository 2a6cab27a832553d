from typing import Optional

import pytest

from src.service.registration.domain.payment_branch import (
    PaymentBranch,
    PaymentType,
    resolve_payment_branch,
)


@pytest.mark.unit
class TestResolvePaymentBranch:
    @pytest.mark.parametrize('payment_type', [None, '', 'thirdParty', 'invoice', 'bitcoin'])
    def test_free_order_never_pays(self, payment_type: Optional[str]) -> None:
        assert (
            resolve_payment_branch(is_free_of_charge=True, payment_type=payment_type)
            == PaymentBranch.NO_PAYMENT
        )

    def test_paid_order_with_third_party_token(self) -> None:
        assert (
            resolve_payment_branch(
                is_free_of_charge=False, payment_type=PaymentType.THIRD_PARTY_PROCESSOR
            )
            == PaymentBranch.THIRD_PARTY_PROCESSOR
        )

    def test_paid_order_with_invoice_token(self) -> None:
        assert (
            resolve_payment_branch(is_free_of_charge=False, payment_type='invoice')
            == PaymentBranch.INVOICE
        )

    @pytest.mark.parametrize('payment_type', [None, '', 'ThirdParty', 'cash'])
    def test_paid_order_with_unknown_token(self, payment_type: Optional[str]) -> None:
        assert (
            resolve_payment_branch(is_free_of_charge=False, payment_type=payment_type)
            == PaymentBranch.UNSUPPORTED
        )
