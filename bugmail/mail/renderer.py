"""
Template Renderer
=================
Renders mail bodies from the Jinja2 templates shipped in mail/templates.

Templates only see booleans and plain strings (see ReportData); blobs
that are attached are never passed in.
"""
from pathlib import Path
from typing import List

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError
from pydantic import BaseModel

from bugmail.core.exceptions import RenderError

_TEMPLATE_DIR = Path(__file__).parent / "templates"


class ReportData(BaseModel):
    """Fixed projection of a report handed to the templates."""
    bot_name: str
    command_prefix: str
    first: bool
    moderation: bool
    maintainers: List[str]
    compiler_id: str
    kernel_repo: str
    kernel_branch: str
    kernel_commit: str
    crash_title: str
    report: str
    error: str
    has_config: bool
    has_log: bool
    repro_syz: bool
    repro_c: bool


class MailRenderer:

    def __init__(self, template_dir: Path = _TEMPLATE_DIR) -> None:
        self.env = Environment(
            loader=FileSystemLoader(str(template_dir)),
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

    def render(self, template: str, data: ReportData) -> str:
        try:
            return self.env.get_template(template).render(**data.model_dump())
        except TemplateError as e:
            raise RenderError(f"failed to execute {template} template: {e}") from e
