"""
Consent gate — the checkpoint before a task agrees to external terms.

    request_consent(task, context, terms_url)

With ``auto_approve`` set the gate resolves immediately and records
the approval as implicit.  Otherwise the task description and terms
URL go to ``context.prompt`` and the run blocks until the user answers.
A decline raises Declined, so the install action is never reached.

Consent is asked at most once per task per run; asking again returns
the recorded decision.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import click

from devsetup.core.context import TaskContext
from devsetup.core.errors import Declined
from devsetup.core.installers.base import InstallerTask
from devsetup.core.models.receipt import TaskState

logger = logging.getLogger(__name__)


@dataclass
class ConsentRequest:
    """A pending or resolved request for user agreement."""

    task: InstallerTask
    description: str
    terms_url: str
    approved: bool = False
    implicit: bool = False


def request_consent(
    task: InstallerTask,
    context: TaskContext,
    terms_url: str,
) -> ConsentRequest:
    """Gate ``task`` on user agreement to ``terms_url``.

    Returns:
        The approved ConsentRequest.

    Raises:
        Declined: The user said no, or nobody could be asked.
    """
    previous = context.consent_for(task)
    if previous is not None:
        if previous.approved:
            context.mark(TaskState.RUNNING)
            return previous
        raise Declined(previous.description, previous.terms_url)

    request = ConsentRequest(
        task=task,
        description=task.describe(),
        terms_url=terms_url,
    )

    if context.auto_approve:
        request.approved = True
        request.implicit = True
        context.record_consent(task, request)
        context.mark(TaskState.RUNNING)
        logger.info("Consent for %s approved implicitly (auto-approve)", request.description)
        return request

    context.mark(TaskState.AWAITING_CONSENT)

    if context.prompt is None:
        logger.warning("No interactive surface to ask consent for %s", request.description)
        approved = False
    else:
        try:
            approved = bool(context.prompt(request))
        except (click.Abort, EOFError):
            approved = False

    request.approved = approved
    context.record_consent(task, request)

    if not approved:
        logger.info("Consent for %s declined", request.description)
        raise Declined(request.description, terms_url)

    context.mark(TaskState.RUNNING)
    logger.info("Consent for %s approved", request.description)
    return request
