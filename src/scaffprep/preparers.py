import logging
import os
from pathlib import Path
from typing import Awaitable, Callable, Protocol

from .config import Config
from .errors import InputError
from .git import clone_repository
from .location import parse_git_location, parse_location_annotation
from .models import Credentials, PreparerOptions, TemplateDescriptor
from .staging import make_staging_dir, resolve_template_dir

logger = logging.getLogger(__name__)

CloneFn = Callable[[str, Path, Credentials | None], Awaitable[None]]


class PreparerBase(Protocol):
    async def prepare(
        self, template: TemplateDescriptor, options: PreparerOptions | None = None
    ) -> Path: ...


class BitbucketPreparer:
    """Check out a template hosted on Bitbucket Cloud or Bitbucket Server."""

    protocols = ("bitbucket/api", "url")

    def __init__(self, config: Config, clone: CloneFn | None = None) -> None:
        self.user = config.get_optional_string("scaffolder.bitbucket.api.username") or ""
        self.private_token = config.get_optional_string("scaffolder.bitbucket.api.token") or ""
        self._clone = clone if clone is not None else clone_repository

    @property
    def credentials(self) -> Credentials | None:
        if not self.private_token:
            return None
        return Credentials(username=self.user, token=self.private_token)

    async def prepare(
        self, template: TemplateDescriptor, options: PreparerOptions | None = None
    ) -> Path:
        annotation = parse_location_annotation(template)
        if annotation.protocol not in self.protocols:
            raise InputError(
                f"Wrong location protocol: {annotation.protocol}, should be 'url'"
            )
        working_directory = options.working_directory if options else None

        repo = parse_git_location(annotation.location)
        template_dir = resolve_template_dir(repo, template.path)

        staging = make_staging_dir(working_directory, template.name)
        await self._clone(repo.checkout_url, staging, self.credentials)

        result = Path(os.path.abspath(staging / template_dir))
        logger.info("Prepared template %s at %s", template.name, result)
        return result


class Preparers:
    """Maps location protocols to the preparer that serves them."""

    def __init__(self) -> None:
        self._items: dict[str, PreparerBase] = {}

    def register(self, protocol: str, preparer: PreparerBase) -> None:
        if protocol in self._items:
            raise ValueError(f"Duplicate preparer registration: {protocol}")
        self._items[protocol] = preparer

    def get(self, template: TemplateDescriptor) -> PreparerBase:
        protocol = parse_location_annotation(template).protocol
        if protocol not in self._items:
            known = ", ".join(self.protocols())
            raise InputError(
                f"No preparer registered for protocol '{protocol}'. Known: [{known}]"
            )
        return self._items[protocol]

    def protocols(self) -> list[str]:
        return sorted(self._items)


def default_preparers(config: Config) -> Preparers:
    preparers = Preparers()
    bitbucket = BitbucketPreparer(config)
    for protocol in BitbucketPreparer.protocols:
        preparers.register(protocol, bitbucket)
    return preparers
