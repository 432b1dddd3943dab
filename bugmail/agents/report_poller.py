"""
Report Poller
=============
One poll cycle of the email channel: report new bugs, then finished test
jobs.

Per report:
    1. Deserialize the destination EmailConfig         (ConfigError)
    2. Destination list = route address (+ maintainers) merged with CC
    3. Attach whichever blobs are non-empty
    4. Render the template and send                    (RenderError, AddressError, SendError)
    5. Bugs:  ask the store to mark the bug Open with its repro level
       Jobs:  ask the store to mark the job reported

Delivery is at-least-once. A failure after a successful send is logged and
left for the next cycle; if the store still considers the bug reportable
it will be sent again. Failures never leak from one report to the next.
"""
import logging
from typing import List

from bugmail.core.constants import (
    ATTACHMENT_CONFIG,
    ATTACHMENT_LOG,
    ATTACHMENT_PATCH,
    ATTACHMENT_REPRO_C,
    ATTACHMENT_REPRO_SYZ,
    BUG_TEMPLATE,
    EMAIL_TYPE,
    JOB_TEMPLATE,
)
from bugmail.core import config
from bugmail.core.exceptions import BugMailError, StoreError
from bugmail.mail.addressing import merge_email_lists
from bugmail.mail.renderer import ReportData
from bugmail.models.bug_report import BugReport
from bugmail.models.bug_update import BugStatus, BugUpdate, repro_level_for
from bugmail.models.email_config import EmailConfig
from bugmail.models.outgoing_email import Attachment
from bugmail.services.mailer import Mailer
from bugmail.services.store_client import DashboardStore

logger = logging.getLogger(__name__)


def build_attachments(rep: BugReport) -> List[Attachment]:
    """Attachments for every non-empty blob; absent data means no entry."""
    blobs = [
        (ATTACHMENT_CONFIG, rep.kernel_config),
        (ATTACHMENT_PATCH, rep.patch),
        (ATTACHMENT_LOG, rep.log),
        (ATTACHMENT_REPRO_SYZ, rep.repro_syz),
        (ATTACHMENT_REPRO_C, rep.repro_c),
    ]
    return [Attachment(name=name, data=data) for name, data in blobs if data]


def build_destinations(rep: BugReport, cfg: EmailConfig) -> List[str]:
    to = [cfg.email]
    if cfg.need_maintainers:
        to.extend(rep.maintainers)
    return merge_email_lists(to, rep.cc)


def build_report_data(rep: BugReport, cfg: EmailConfig) -> ReportData:
    return ReportData(
        bot_name=config.MAIL_BOT_NAME,
        command_prefix=config.command_prefix(),
        first=rep.first,
        moderation=cfg.moderation,
        maintainers=rep.maintainers,
        compiler_id=rep.compiler_id,
        kernel_repo=rep.kernel_repo,
        kernel_branch=rep.kernel_branch,
        kernel_commit=rep.kernel_commit,
        crash_title=rep.crash_title,
        report=rep.report.decode("utf-8", errors="replace"),
        error=rep.error.decode("utf-8", errors="replace"),
        has_config=bool(rep.kernel_config),
        has_log=bool(rep.log),
        repro_syz=bool(rep.repro_syz),
        repro_c=bool(rep.repro_c),
    )


class ReportPoller:
    """
    Drives the outbound half of the email channel.
    Poll calls that fail raise StoreError; everything per-report is contained.
    """

    def __init__(self, store: DashboardStore, mailer: Mailer) -> None:
        self.store = store
        self.mailer = mailer

    async def poll(self) -> None:
        await self.poll_bugs()
        await self.poll_jobs()

    async def email_report(self, rep: BugReport, template: str) -> None:
        cfg = EmailConfig.from_blob(rep.config)
        await self.mailer.send_report(
            bug_id=rep.id,
            title=rep.title,
            to=build_destinations(rep, cfg),
            ext_id=rep.ext_id,
            attachments=build_attachments(rep),
            template=template,
            data=build_report_data(rep, cfg),
        )

    async def poll_bugs(self) -> int:
        """Report every newly reportable bug. Returns the number of emails sent."""
        reports = await self.store.reporting_poll(EMAIL_TYPE)
        sent = 0
        for rep in reports:
            try:
                await self.email_report(rep, BUG_TEMPLATE)
            except BugMailError as e:
                logger.error("failed to report bug %s: %s", rep.id, e)
                continue
            sent += 1

            cmd = BugUpdate(id=rep.id, status=BugStatus.OPEN, repro_level=repro_level_for(rep))
            try:
                result = await self.store.update_bug(cmd)
            except StoreError as e:
                logger.error("failed to update reported bug %s: %s", rep.id, e)
                continue
            if not result.ok:
                logger.error(
                    "failed to update reported bug %s: ok=%s reason=%s",
                    rep.id, result.ok, result.reason,
                )
        return sent

    async def poll_jobs(self) -> int:
        """Report every finished test job. Returns the number of emails sent."""
        jobs = await self.store.poll_completed_jobs(EMAIL_TYPE)
        sent = 0
        for job in jobs:
            try:
                await self.email_report(job, JOB_TEMPLATE)
            except BugMailError as e:
                logger.error("failed to report job %s: %s", job.job_id, e)
                continue
            sent += 1
            try:
                await self.store.job_reported(job.job_id)
            except StoreError as e:
                logger.error("failed to mark job %s reported: %s", job.job_id, e)
        return sent
