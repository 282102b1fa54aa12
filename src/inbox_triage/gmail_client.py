"""Gmail API client functions for fetching and mutating messages."""

from __future__ import annotations

import logging
from typing import Callable

from googleapiclient.errors import HttpError
from googleapiclient.http import BatchHttpRequest
from tenacity import retry, retry_if_exception, stop_after_attempt, wait_exponential

from inbox_triage.constants import BATCH_SIZE, METADATA_HEADERS, MODIFY_BATCH_SIZE, PAGE_SIZE
from inbox_triage.models import MessageRecord
from inbox_triage.rules import normalize_labels

logger = logging.getLogger(__name__)


def _is_retryable_http_error(exc: BaseException) -> bool:
    return isinstance(exc, HttpError) and exc.resp.status in (429, 500, 503)


def list_message_ids(
    service,
    query: str | None = None,
    max_results: int | None = None,
) -> list[str]:
    """List all message IDs matching the query, handling pagination."""
    ids: list[str] = []
    page_token: str | None = None

    while True:
        kwargs: dict = {"userId": "me", "maxResults": PAGE_SIZE, "fields": "messages/id,nextPageToken"}
        if query:
            kwargs["q"] = query
        if page_token:
            kwargs["pageToken"] = page_token

        resp = service.users().messages().list(**kwargs).execute()
        for msg in resp.get("messages", []):
            ids.append(msg["id"])
            if max_results and len(ids) >= max_results:
                return ids[:max_results]

        page_token = resp.get("nextPageToken")
        if not page_token:
            break

    return ids


def record_from_response(msg_id: str, response: dict) -> MessageRecord:
    """Build a MessageRecord from a ``format=metadata`` message resource."""
    headers = {}
    for h in response.get("payload", {}).get("headers", []):
        headers[h["name"]] = h["value"]

    return MessageRecord(
        id=msg_id,
        sender=headers.get("From", ""),
        subject=headers.get("Subject", ""),
        snippet=response.get("snippet", ""),
        # Fall back to the server receive time when the Date header is missing.
        timestamp=headers.get("Date") or response.get("internalDate"),
        labels=normalize_labels(response.get("labelIds", [])),
    )


@retry(
    retry=retry_if_exception(_is_retryable_http_error),
    wait=wait_exponential(multiplier=1, min=1, max=60),
    stop=stop_after_attempt(5),
    reraise=True,
)
def _execute_batch(batch: BatchHttpRequest) -> None:
    batch.execute()


def fetch_message_records(
    service,
    message_ids: list[str],
    callback: Callable[[int, int], None] | None = None,
) -> list[MessageRecord]:
    """Fetch message metadata in batches, returning records in ``message_ids`` order.

    Messages that fail to fetch are logged and left out.
    """
    fetched: dict[str, MessageRecord] = {}
    total_batches = (len(message_ids) + BATCH_SIZE - 1) // BATCH_SIZE

    for batch_num in range(total_batches):
        start = batch_num * BATCH_SIZE
        end = min(start + BATCH_SIZE, len(message_ids))
        chunk = message_ids[start:end]

        batch = service.new_batch_http_request()

        def _make_callback(msg_id: str):
            def _cb(request_id, response, exception):
                if exception is not None:
                    logger.warning("Failed to fetch message %s: %s", msg_id, exception)
                    return
                fetched[msg_id] = record_from_response(msg_id, response)

            return _cb

        for msg_id in chunk:
            batch.add(
                service.users().messages().get(
                    userId="me",
                    id=msg_id,
                    format="metadata",
                    metadataHeaders=METADATA_HEADERS,
                ),
                callback=_make_callback(msg_id),
            )

        _execute_batch(batch)

        if callback:
            callback(batch_num + 1, total_batches)

    return [fetched[msg_id] for msg_id in message_ids if msg_id in fetched]


@retry(
    retry=retry_if_exception(_is_retryable_http_error),
    wait=wait_exponential(multiplier=1, min=1, max=60),
    stop=stop_after_attempt(5),
    reraise=True,
)
def _execute_batch_modify(service, msg_ids: list[str], add: list[str], remove: list[str]) -> None:
    body: dict = {"ids": msg_ids}
    if add:
        body["addLabelIds"] = add
    if remove:
        body["removeLabelIds"] = remove
    service.users().messages().batchModify(userId="me", body=body).execute()


def _modify_messages(
    service,
    message_ids: list[str],
    add: list[str],
    remove: list[str],
    callback: Callable[[int, int], None] | None = None,
) -> int:
    total_batches = max(1, (len(message_ids) + MODIFY_BATCH_SIZE - 1) // MODIFY_BATCH_SIZE)
    modified = 0

    for batch_num in range(total_batches):
        start = batch_num * MODIFY_BATCH_SIZE
        end = min(start + MODIFY_BATCH_SIZE, len(message_ids))
        chunk = message_ids[start:end]
        if not chunk:
            break

        _execute_batch_modify(service, chunk, add, remove)
        modified += len(chunk)

        if callback:
            callback(batch_num + 1, total_batches)

    return modified


def archive_messages(
    service,
    message_ids: list[str],
    callback: Callable[[int, int], None] | None = None,
) -> int:
    """Archive messages by removing the INBOX label."""
    return _modify_messages(service, message_ids, add=[], remove=["INBOX"], callback=callback)


def trash_messages(
    service,
    message_ids: list[str],
    callback: Callable[[int, int], None] | None = None,
) -> int:
    """Move messages to trash in batches using batchModify."""
    return _modify_messages(service, message_ids, add=["TRASH"], remove=["INBOX"], callback=callback)
