from pydantic import BaseModel, Field, ValidationError

from retrievo_escrow.utils.errors import InvalidInput


class ReportItemRequest(BaseModel):
    description: str
    location: str = ""
    reward_value: int  # value attached to the call, in minor units


class ClaimItemRequest(BaseModel):
    # emptiness is checked by the registry, after existence and state
    proof_description: str = ""


class ValidatedReportItem(BaseModel):
    description: str = Field(min_length=1)
    location: str = ""
    reward_value: int = Field(gt=0)


def validate_report_form(payload: ReportItemRequest) -> ValidatedReportItem:
    try:
        return ValidatedReportItem(
            description=payload.description.strip(),
            location=payload.location.strip(),
            reward_value=payload.reward_value,
        )
    except ValidationError as e:
        raise InvalidInput(e.errors(include_url=False, include_context=False))
