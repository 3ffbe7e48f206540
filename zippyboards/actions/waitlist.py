"""Landing page waitlist."""
import logging

from email_validator import EmailNotValidError, validate_email

from zippyboards.actions.common import action
from zippyboards.data_service import DataServiceClient, normalize_email
from zippyboards.errors import UNIQUE_VIOLATION, DataServiceError, ValidationFailure
from zippyboards.schemas.waitlist import WaitlistResponse

logger = logging.getLogger(__name__)


@action
def join_waitlist(client: DataServiceClient, email: str):
    try:
        email = validate_email(email or "", check_deliverability=False).normalized
    except EmailNotValidError as exc:
        raise ValidationFailure("Please enter a valid email address.") from exc

    try:
        rows = client.table("waitlist").insert({"email": normalize_email(email)})
    except DataServiceError as exc:
        if exc.code == UNIQUE_VIOLATION:
            raise ValidationFailure("This email is already on our waitlist!") from exc
        raise
    logger.info("Waitlist signup %s", rows[0]["id"])
    return WaitlistResponse.model_validate(rows[0])
