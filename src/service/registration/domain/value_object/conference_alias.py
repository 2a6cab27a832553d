from uuid import UUID

import attrs


@attrs.define(frozen=True)
class ConferenceAlias:
    """Published conference a registration runs against, addressed by its code."""

    id: UUID
    code: str
    name: str
