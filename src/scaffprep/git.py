import asyncio
import base64
import logging
import os
from pathlib import Path

from .errors import CheckoutError
from .models import Credentials

logger = logging.getLogger(__name__)


def clone_env(credentials: Credentials | None) -> dict[str, str]:
    """Environment for a ``git clone`` run.

    Credentials travel as an ``http.extraHeader`` set through
    ``GIT_CONFIG_*`` variables, so they are neither on the command line
    nor written to the checkout's ``.git/config``.
    """
    env = os.environ.copy()
    env["GIT_TERMINAL_PROMPT"] = "0"
    if credentials and credentials.token:
        basic = base64.b64encode(
            f"{credentials.username}:{credentials.token}".encode()
        ).decode("ascii")
        env["GIT_CONFIG_COUNT"] = "1"
        env["GIT_CONFIG_KEY_0"] = "http.extraHeader"
        env["GIT_CONFIG_VALUE_0"] = f"Authorization: Basic {basic}"
    return env


def _redact(text: str, credentials: Credentials | None) -> str:
    if credentials and credentials.token:
        text = text.replace(credentials.token, "***")
    return text


async def clone_repository(
    url: str, dest: Path | str, credentials: Credentials | None = None
) -> None:
    """Full clone of the remote default branch into ``dest``.

    Single attempt: any failure raises ``CheckoutError`` and leaves
    ``dest`` as it is.
    """
    cmd = ["git", "clone", "--", url, str(dest)]
    logger.info("Cloning %s into %s", url, dest)
    try:
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env=clone_env(credentials),
        )
    except FileNotFoundError as e:
        raise CheckoutError("git executable not found on PATH") from e
    _, stderr = await proc.communicate()
    if proc.returncode != 0:
        err = _redact(stderr.decode(errors="replace").strip(), credentials)
        raise CheckoutError(
            f"git clone of {url} failed (exit {proc.returncode}): {err}",
            returncode=proc.returncode,
            stderr=err,
        )
    logger.debug("Clone of %s finished", url)
