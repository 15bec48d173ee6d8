"""Rendering the workflow to YAML and writing it into the repository."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import yaml

from ci_gen.config.models import CiGenConfig
from ci_gen.jobs import build_workflow
from ci_gen.models import Workflow
from protoc_bin_vendored.core.logging import get_logger

LOGGER = get_logger(__name__)

GENERATED_HEADER = "# @generated by ci-gen, do not edit; regenerate with `ci-gen`\n\n"


class _WorkflowDumper(yaml.SafeDumper):
    """SafeDumper indenting sequences under their parent key."""

    def increase_indent(self, flow: bool = False, indentless: bool = False):
        return super().increase_indent(flow, False)


def _str_presenter(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    # Multi-line values (cache paths) read better as block literals
    if "\n" in data:
        return dumper.represent_scalar("tag:yaml.org,2002:str", data, style="|")
    return dumper.represent_scalar("tag:yaml.org,2002:str", data)


_WorkflowDumper.add_representer(str, _str_presenter)


def render_workflow(workflow: Workflow) -> str:
    """Serialize ``workflow`` to the YAML text written to disk."""
    body = yaml.dump(
        workflow.to_dict(),
        Dumper=_WorkflowDumper,
        sort_keys=False,
        default_flow_style=False,
        width=1000,
    )
    return GENERATED_HEADER + body


def workflow_path(root: Path, config: CiGenConfig) -> Path:
    path = config.workflow.path
    return path if path.is_absolute() else root / path


def write_workflow(root: Path, config: Optional[CiGenConfig] = None) -> Path:
    """Generate the workflow for ``root`` and write it.

    Returns:
        Path of the written file.
    """
    config = config or CiGenConfig()
    text = render_workflow(build_workflow(root, config))
    path = workflow_path(root, config)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    LOGGER.info(f"Wrote {path}")
    return path


def is_up_to_date(root: Path, config: Optional[CiGenConfig] = None) -> bool:
    """Whether the workflow on disk matches what would be generated."""
    config = config or CiGenConfig()
    path = workflow_path(root, config)
    if not path.is_file():
        LOGGER.debug(f"{path} does not exist")
        return False
    expected = render_workflow(build_workflow(root, config))
    return path.read_text(encoding="utf-8") == expected
