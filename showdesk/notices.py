"""
User-facing notices for mutating operations.
Level rules: everything failed -> error, something failed -> warning, else success.
"""

from showdesk.models.enums import NoticeLevel
from showdesk.schemas.imports import Notice


def bulk_notice(successful: int, failed: int, message: str, updated: int = 0) -> Notice:
    if failed > 0 and successful == 0 and updated == 0:
        level = NoticeLevel.ERROR
    elif failed > 0:
        level = NoticeLevel.WARNING
    else:
        level = NoticeLevel.SUCCESS
    return Notice(level=level, message=message)


def success(message: str) -> Notice:
    return Notice(level=NoticeLevel.SUCCESS, message=message)


def error(message: str) -> Notice:
    return Notice(level=NoticeLevel.ERROR, message=message)


def commit_message(successful: int, updated: int, skipped: int, failed: int) -> str:
    message = f"Successfully created {successful} show(s), updated {updated}, skipped {skipped}."
    if failed:
        message += f" {failed} failed."
    return message


def bulk_result_notice(verb: str, past: str, successful: int, failed: int, message: str = "") -> Notice:
    """Notice for bulk archive / unarchive / delete; verb='archive', past='archived'."""
    if failed == 0:
        text = f"Successfully {past} all {successful} selected shows!"
    elif successful == 0:
        text = f"Failed to {verb} any shows. {message or 'Unknown error'}"
    else:
        text = f"{past.capitalize()} {successful} shows, {failed} failed"
    return bulk_notice(successful, failed, text)
