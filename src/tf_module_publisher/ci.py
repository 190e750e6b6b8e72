"""
GitHub Actions integration.

Reads action inputs from ``INPUT_*`` variables the way ``@actions/core``
does and writes step outputs to the ``GITHUB_OUTPUT`` file. This is the
only place the process environment is read.
"""

import os
import tempfile
import uuid
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from tf_module_publisher.core.config import DEFAULT_KEEP_VERSIONS
from tf_module_publisher.core.exceptions import ConfigurationError

TRUE_VALUES = frozenset({"true", "True", "TRUE"})
FALSE_VALUES = frozenset({"false", "False", "FALSE"})


def input_env_var(name: str) -> str:
    """Environment variable GitHub Actions uses for input ``name``."""
    return f"INPUT_{name.replace(' ', '_').upper()}"


def get_input(
    name: str,
    environ: Mapping[str, str] | None = None,
    required: bool = False,
) -> str:
    """
    Read one action input.

    Args:
        name: Input name as declared in action.yml
        environ: Environment mapping (defaults to os.environ)
        required: Raise if the input is missing or empty

    Returns:
        Trimmed input value, empty string if not set

    Raises:
        ConfigurationError: If a required input is not supplied
    """
    env = os.environ if environ is None else environ
    value = env.get(input_env_var(name), "").strip()
    if required and not value:
        raise ConfigurationError(
            f"Input required and not supplied: {name}",
            input_name=name,
        )
    return value


def get_boolean_input(
    name: str,
    environ: Mapping[str, str] | None = None,
    default: bool = False,
) -> bool:
    """Read a YAML 1.2 core-schema boolean input."""
    value = get_input(name, environ)
    if not value:
        return default
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    raise ConfigurationError(
        f"Input does not meet YAML 1.2 \"Core Schema\" specification: {name}. "
        "Support boolean input list: `true | True | TRUE | false | False | FALSE`",
        input_name=name,
    )


def read_action_inputs(environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    """
    Collect the publish inputs of the action.

    Returns:
        Raw field values for ``load_options``
    """
    keep_raw = get_input("keep-versions", environ) or str(DEFAULT_KEEP_VERSIONS)
    try:
        keep_versions = int(keep_raw)
    except ValueError:
        raise ConfigurationError(
            f"Invalid keep-versions value: {keep_raw}. Must be a positive integer.",
            input_name="keep-versions",
        ) from None

    return {
        "bucket_name": get_input("gcs-bucket", environ, required=True),
        "module_name": get_input("module-name", environ, required=True),
        "module_version": get_input("module-version", environ, required=True),
        "module_path": Path(get_input("module-path", environ) or "."),
        "credentials_json": get_input("google-credentials", environ, required=True),
        "delete_old_versions": get_boolean_input("delete-old-versions", environ),
        "keep_versions": keep_versions,
    }


def runner_temp_dir(environ: Mapping[str, str] | None = None) -> Path:
    """Temporary directory of the runner, or the system one outside CI."""
    env = os.environ if environ is None else environ
    return Path(env.get("RUNNER_TEMP") or tempfile.gettempdir())


def github_output_file(environ: Mapping[str, str] | None = None) -> Path | None:
    """Path of the step output file, None outside GitHub Actions."""
    env = os.environ if environ is None else environ
    value = env.get("GITHUB_OUTPUT")
    return Path(value) if value else None


def format_output(name: str, value: str) -> str:
    """Render one output in the GITHUB_OUTPUT file format."""
    if "\n" not in value:
        return f"{name}={value}\n"
    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    return f"{name}<<{delimiter}\n{value}\n{delimiter}\n"


def write_outputs(outputs: Mapping[str, str], output_file: Path | None) -> None:
    """Append step outputs to the GITHUB_OUTPUT file, if one is configured."""
    if output_file is None:
        return
    with open(output_file, "a", encoding="utf-8") as f:
        for name, value in outputs.items():
            f.write(format_output(name, value))


def error_annotation(message: str) -> str:
    """Workflow command that marks the step as failed with ``message``."""
    escaped = message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
    return f"::error::{escaped}"
