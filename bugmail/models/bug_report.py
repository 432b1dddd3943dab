"""
Bug Report Model
================
Pydantic model for one bug (or completed test job) that the store wants
reported on a channel. Consumed read-only.

Fields:
    id              — bug identifier, embedded into the sender address
    ext_id          — external thread id (Message-ID of the first report)
    title           — subject line of the report
    first           — True for the very first report of this bug
    maintainers     — addresses of the responsible maintainers
    cc              — extra addresses accumulated from earlier replies
    kernel_*        — build metadata (repo, branch, commit)
    compiler_id     — compiler identification string
    crash_title     — title of the crash that was hit
    report / error  — free-form text blobs rendered into the body
    kernel_config   — attached as config.txt when non-empty
    patch           — attached as patch.txt when non-empty
    log             — attached as raw.log when non-empty
    repro_syz       — attached as repro.txt when non-empty
    repro_c         — attached as repro.c when non-empty
    config          — serialized EmailConfig of the destination route
    job_id          — set only for completed test jobs

Blob fields travel base64-encoded in JSON.
"""
from typing import List
from pydantic import BaseModel, ConfigDict


class BugReport(BaseModel):
    model_config = ConfigDict(ser_json_bytes="base64", val_json_bytes="base64")

    id: str
    ext_id: str = ""
    title: str = ""
    first: bool = False
    maintainers: List[str] = []
    cc: List[str] = []
    kernel_repo: str = ""
    kernel_branch: str = ""
    kernel_commit: str = ""
    compiler_id: str = ""
    crash_title: str = ""
    report: bytes = b""
    error: bytes = b""
    kernel_config: bytes = b""
    patch: bytes = b""
    log: bytes = b""
    repro_syz: bytes = b""
    repro_c: bytes = b""
    config: bytes = b""
    job_id: str = ""
