import re
from urllib.parse import unquote, urlparse

from .errors import InputError, LocationParseError
from .models import CLOUD_HOST, LocationAnnotation, RepositoryRef, TemplateDescriptor, Topology

LOCATION_ANNOTATION = "backstage.io/managed-by-location"

# user@host:owner/repo[.git][/path]
_SCP_RE = re.compile(r"^(?:(?P<user>[^@/:]+)@)?(?P<host>[^:/]+):(?P<path>[^/].*)$")


def parse_location_annotation(template: TemplateDescriptor) -> LocationAnnotation:
    annotation = template.annotations.get(LOCATION_ANNOTATION)
    if not annotation:
        raise InputError(
            f"No location annotation provided in entity: {template.name}"
        )
    protocol, _, location = annotation.partition(":")
    if not protocol or not location:
        raise InputError(
            f"Failure to parse either protocol or location for entity: {template.name}"
        )
    return LocationAnnotation(protocol=protocol, location=location)


def _split_repo_path(host: str, segs: list[str]) -> tuple[str, str, list[str]]:
    """Pick owner, repository name and in-repo path segments out of a URL path."""
    if host != CLOUD_HOST:
        # Bitbucket Server browse links: projects/KEY/repos/name/browse/path
        if len(segs) >= 4 and segs[0] == "projects" and segs[2] == "repos":
            rest = segs[4:]
            if rest and rest[0] == "browse":
                rest = rest[1:]
            return segs[1], segs[3], rest
        # Clone links that already carry the scm segment
        if len(segs) >= 3 and segs[0] == "scm":
            segs = segs[1:]
    return segs[0], segs[1], segs[2:]


def parse_git_location(location: str) -> RepositoryRef:
    user = None
    if "://" in location:
        u = urlparse(location)
        if not u.scheme or not u.hostname:
            raise LocationParseError(f"Invalid Git location URL: {location}")
        scheme = u.scheme.lower()
        host = u.hostname.lower()
        if host.startswith("www."):
            host = host[4:]
        if u.port:
            host = f"{host}:{u.port}"
        # http(s) credentials come from configuration, ssh keeps its login
        if scheme == "ssh":
            user = u.username
        path = u.path
    else:
        m = _SCP_RE.match(location)
        if not m:
            raise LocationParseError(f"Invalid Git location URL: {location}")
        scheme = "ssh"
        user = m.group("user")
        host = m.group("host").lower()
        path = m.group("path")

    segs = [unquote(s) for s in path.split("/") if s]
    if len(segs) < 2:
        raise LocationParseError(
            f"Git location must name an owner and a repository: {location}"
        )
    owner, name, path_parts = _split_repo_path(host, segs)
    name = name.removesuffix(".git")
    if not owner or not name:
        raise LocationParseError(
            f"Git location must name an owner and a repository: {location}"
        )
    return RepositoryRef(
        scheme=scheme,
        host=host,
        owner=owner,
        name=name,
        filepath="/".join(path_parts),
        topology=Topology.CLOUD if host == CLOUD_HOST else Topology.SELF_HOSTED,
        user=user,
    )
