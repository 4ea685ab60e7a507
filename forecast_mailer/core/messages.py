"""Delivery summary helpers.

Both functions are folds: the caller owns the running message and threads it
through one call per item, in ascending index order, with a fixed length.
"""

from forecast_mailer.models.delivery import DeliveryError, DeliveryResult
from forecast_mailer.utils.logger import logger

SUMMARY_SEPARATOR = " \n---\n "


def build_message_from_list(item: str, index: int, length: int, message: str) -> str:
    """Append ``item`` to ``message`` so the full fold reads "a, b and c".

    >>> build_message_from_list("apple", 0, 1, "Fruit: ")
    'Fruit: apple'
    """
    # Nothing to render; leave the running message untouched.
    if length == 0:
        return message
    if length == 1:
        return f"{message}{item}"
    if index == 0:
        return f"{message}{item}"
    if index == length - 1:
        return f"{message} and {item}"
    return f"{message}, {item}"


def check_email_sent_and_build_message(
    message: str,
    label: str,
    result: DeliveryResult,
    recipient: str,
    recipient_count: int,
    index: int,
) -> str:
    """Record one delivery result in the running summary.

    Errors are appended verbatim followed by ``SUMMARY_SEPARATOR``; successes
    add the recipient to the list phrase. Nothing is retried.
    """
    if isinstance(result, DeliveryError):
        logger.warning(f"{label} email not sent")
        logger.warning(result.message)
        return f"{message}{result.message}{SUMMARY_SEPARATOR}"

    logger.info(f"{label} email response: {result.data}")
    return build_message_from_list(recipient, index, recipient_count, message)
