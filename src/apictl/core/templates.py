"""Template resolution for request definitions.

Templates are strings with `${name}` placeholders. A placeholder names
either a context variable or a field of a response recorded earlier in
the same run:

    ${base_url}/users/${response.get-posts.0.userId}

Resolution is a single left-to-right pass. Substituted values are never
scanned again, so a value containing `${...}` is inserted literally.
"""

from logging import getLogger
from typing import TYPE_CHECKING

from apictl.errors import ResponseError, UnresolvedVariable
from apictl.names import PLACEHOLDER_PATTERN, RESPONSE_PREFIX
from apictl.schema.bodies import FilePart, FileSource, FormBody, MultipartBody, NoBody, RawBody, TextPart, TextSource
from apictl.values import stringify

if TYPE_CHECKING:
    from collections.abc import Mapping
    from re import Match

if TYPE_CHECKING:
    from apictl.core.responses import ResponseStore
    from apictl.schema.bodies import Body
    from apictl.schema.requests import RequestDefinition

logger = getLogger(__name__)


class TemplateResolver:
    """Resolver of `${...}` placeholders.

    The resolver holds no state of its own besides references to the
    context and the response store of the run, so resolving the same
    template twice against unchanged inputs yields the same result.
    """

    def __init__(self, variables: 'Mapping[str, str]', responses: 'ResponseStore') -> None:
        """Initialize the resolver.

        Args:
            variables: Active context of the run.
            responses: Response store of the run.
        """
        self.variables = variables
        self.responses = responses

    def resolve(self, template: str) -> str:
        """Substitute every placeholder in a template.

        Args:
            template: String possibly containing placeholders.

        Returns:
            The resolved string. Strings without placeholders are
            returned unchanged.

        Raises:
            UnresolvedVariable: If a placeholder can not be satisfied.
        """
        if '${' not in template:
            return template

        return PLACEHOLDER_PATTERN.sub(self._replace, template)

    def lookup(self, name: str) -> str:
        """Resolve a single placeholder name to its text value.

        Context variables are looked up first. Names starting with the
        `response.` segment are routed to the response store: the second
        segment is the request identifier and the remaining segments are
        a field path into the parsed JSON body.

        Args:
            name: Placeholder name without the `${` and `}` delimiters.

        Returns:
            The text value of the placeholder.

        Raises:
            UnresolvedVariable: If the name is neither a context variable
                nor a reference to an executed response.
        """
        if name in self.variables:
            return self.variables[name]

        head, _, rest = name.partition('.')
        if head != RESPONSE_PREFIX:
            raise UnresolvedVariable(name, 'not defined in the active context')

        request, _, path = rest.partition('.')
        if not request:
            raise UnresolvedVariable(name, 'missing request identifier')

        try:
            value = self.responses.field(request, path)
        except ResponseError as error:
            raise UnresolvedVariable(name, error.message) from error

        return stringify(value)

    def _replace(self, match: 'Match[str]') -> str:
        """Replace one placeholder match."""
        name = match.group(1)
        value = self.lookup(name)

        logger.debug('Resolved placeholder %r', name)

        return value

    def resolve_mapping(self, templates: 'Mapping[str, str]') -> dict[str, str]:
        """Resolve every value of a mapping, keeping the key order."""
        return {
            key: self.resolve(value)
            for key, value in templates.items()
        }

    def resolve_body(self, body: 'Body') -> 'Body':
        """Resolve every template in a body definition.

        Only paths of file sources are resolved; the files themselves are
        read later and sent verbatim.

        Args:
            body: Body definition.

        Returns:
            A copy of the body with resolved templates.

        Raises:
            UnresolvedVariable: If a placeholder can not be satisfied.
        """
        match body:
            case NoBody():
                return body

            case RawBody(source=TextSource(data=data)):
                return body.model_copy(update={
                    'source': body.source.model_copy(update={'data': self.resolve(data)}),
                })

            case RawBody(source=FileSource(path=path)):
                return body.model_copy(update={
                    'source': body.source.model_copy(update={'path': self.resolve(path)}),
                })

            case FormBody(data=data):
                return body.model_copy(update={'data': self.resolve_mapping(data)})

            case MultipartBody(data=data):
                return body.model_copy(update={'data': {
                    name: self._resolve_part(part)
                    for name, part in data.items()
                }})

        raise TypeError(f'Unsupported body {body!r}')  # pragma: no cover

    def _resolve_part(self, part: TextPart | FilePart) -> TextPart | FilePart:
        """Resolve the template of a multipart field."""
        if isinstance(part, TextPart):
            return part.model_copy(update={'data': self.resolve(part.data)})

        return part.model_copy(update={'path': self.resolve(part.path)})

    def resolve_request(self, definition: 'RequestDefinition') -> 'RequestDefinition':
        """Resolve every template of a request definition.

        Args:
            definition: Request definition as loaded from configuration.

        Returns:
            A copy of the definition with URL, headers, query parameters
            and body templates resolved.

        Raises:
            UnresolvedVariable: If a placeholder can not be satisfied.
        """
        return definition.model_copy(update={
            'url': self.resolve(definition.url),
            'headers': self.resolve_mapping(definition.headers),
            'query_parameters': self.resolve_mapping(definition.query_parameters),
            'body': self.resolve_body(definition.body),
        })


def resolve(template: str, variables: 'Mapping[str, str]', responses: 'ResponseStore') -> str:
    """Resolve a template against a context and a response store."""
    return TemplateResolver(variables, responses).resolve(template)
