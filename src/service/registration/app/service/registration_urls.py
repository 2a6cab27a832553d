from urllib.parse import quote, urlencode
from uuid import UUID

import attrs


API_PREFIX = '/api'


@attrs.define(frozen=True)
class RegistrationUrls:
    """Builds the URLs of the registration pages of one conference."""

    conference_code: str

    @property
    def base(self) -> str:
        return f'{API_PREFIX}/{quote(self.conference_code, safe="")}/registration'

    def start_registration(self, *, order_id: UUID, order_version: int) -> str:
        return f'{self.base}?{urlencode({"order_id": order_id, "order_version": order_version})}'

    def registrant_details(self, *, order_id: UUID, order_version: int) -> str:
        return f'{self.base}/{order_id}/registrant?{urlencode({"order_version": order_version})}'

    def thank_you(self, *, order_id: UUID) -> str:
        return f'{self.base}/{order_id}/thank-you'

    def expired_order(self, *, order_id: UUID) -> str:
        return f'{self.base}/{order_id}/expired'

    def third_party_payment(
        self, *, payment_id: UUID, payment_accepted_url: str, payment_rejected_url: str
    ) -> str:
        query = urlencode(
            {
                'payment_id': payment_id,
                'payment_accepted_url': payment_accepted_url,
                'payment_rejected_url': payment_rejected_url,
            }
        )
        return f'{API_PREFIX}/{quote(self.conference_code, safe="")}/payment/third-party?{query}'
