"""Operation registry: the seven Noun Project tools and their argument schemas.

Each operation's arguments are declared once, as a pydantic input model. The
same model validates incoming arguments and is rendered into the JSON Schema
advertised to MCP clients, so adding an operation means adding one input model,
one descriptor, and one client method.
"""

import re
from typing import Any, Dict, List, Literal, Mapping, Optional, Tuple, Type, Union, get_args, get_origin

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from nounproject_mcp.errors import ArgumentError

ThumbnailSize = Literal[42, 84, 200]
Flag = Literal[0, 1]

_LINE_WEIGHT_RANGE = re.compile(r"^(\d{1,2})(?:-(\d{1,2}))?$")
MIN_LINE_WEIGHT = 1
MAX_LINE_WEIGHT = 60


# ─── Input Models ────────────────────────────────────────────────────────────


class SearchIconsInput(BaseModel):
    """Input for searching icons by keyword."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    query: str = Field(
        ...,
        description='Search term for icons (e.g., "dog", "house", "bicycle")',
        min_length=1,
    )
    styles: Optional[Literal["solid", "line", "solid,line"]] = Field(
        default=None,
        description="Filter by icon style: solid (filled), line (outline), or both",
    )
    line_weight: Optional[Union[int, str]] = Field(
        default=None,
        description='For line icons, filter by line weight (1-60) or range (e.g., "18-20")',
    )
    limit_to_public_domain: Optional[Flag] = Field(
        default=None,
        description="Set to 1 to limit results to public domain icons only (free to use without attribution)",
    )
    thumbnail_size: Optional[ThumbnailSize] = Field(
        default=None,
        description="Thumbnail size to return (42, 84, or 200 pixels)",
    )
    include_svg: Optional[Flag] = Field(
        default=None,
        description="Set to 1 to include SVG URLs in the response",
    )
    limit: Optional[int] = Field(
        default=None,
        description="Maximum number of results to return (default varies by API)",
        ge=1,
    )
    next_page: Optional[str] = Field(
        default=None,
        description="Pagination token for the next page of results",
    )
    prev_page: Optional[str] = Field(
        default=None,
        description="Pagination token for the previous page of results",
    )

    @field_validator("line_weight")
    @classmethod
    def _check_line_weight(cls, value: Optional[Union[int, str]]) -> Optional[Union[int, str]]:
        if value is None:
            return value
        if isinstance(value, int):
            bounds = [value]
        else:
            match = _LINE_WEIGHT_RANGE.match(value)
            if not match:
                raise ValueError('must be a number or a range such as "18-20"')
            bounds = [int(part) for part in match.groups() if part is not None]
            if len(bounds) == 2 and bounds[0] > bounds[1]:
                raise ValueError("range start must not exceed range end")
        if any(b < MIN_LINE_WEIGHT or b > MAX_LINE_WEIGHT for b in bounds):
            raise ValueError(f"must be between {MIN_LINE_WEIGHT} and {MAX_LINE_WEIGHT}")
        return value


class GetIconInput(BaseModel):
    """Input for retrieving a single icon."""
    model_config = ConfigDict(extra="forbid")

    icon_id: int = Field(..., description="The unique numeric ID of the icon", ge=1)
    thumbnail_size: Optional[ThumbnailSize] = Field(
        default=None,
        description="Thumbnail size to return (42, 84, or 200 pixels)",
    )


class GetCollectionInput(BaseModel):
    """Input for retrieving a collection and its icons."""
    model_config = ConfigDict(extra="forbid")

    collection_id: int = Field(..., description="The unique ID of the collection", ge=1)
    thumbnail_size: Optional[ThumbnailSize] = Field(
        default=None,
        description="Thumbnail size to return for icons (42, 84, or 200 pixels)",
    )
    include_svg: Optional[Flag] = Field(
        default=None,
        description="Set to 1 to include SVG URLs in the response",
    )
    limit: Optional[int] = Field(
        default=None,
        description="Maximum number of icons to return from the collection",
        ge=1,
    )


class SearchCollectionsInput(BaseModel):
    """Input for searching collections by keyword."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    query: str = Field(
        ...,
        description='Search term for collections (e.g., "winter", "business", "animals")',
        min_length=1,
    )
    blacklist: Optional[Flag] = Field(
        default=None,
        description="Set to 1 to remove results matching terms or IDs in blacklist",
    )
    limit: Optional[int] = Field(default=None, description="Maximum number of results to return", ge=1)
    prev_page: Optional[str] = Field(default=None, description="Token for paging to the previous page")
    next_page: Optional[str] = Field(default=None, description="Token for paging to the next page")


class AutocompleteInput(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    query: str = Field(..., description="Partial search term to get suggestions for", min_length=1)
    limit: Optional[int] = Field(default=None, description="Maximum number of suggestions to return", ge=1)


class CheckUsageInput(BaseModel):
    model_config = ConfigDict(extra="forbid")


class DownloadIconInput(BaseModel):
    """Input for building a recolored/resized download URL."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    icon_id: int = Field(..., description="The unique ID of the icon to download", ge=1)
    color: Optional[str] = Field(
        default=None,
        description='Hexadecimal color value without # (e.g., "FF0000" for red)',
        pattern=r"^[0-9A-Fa-f]{6}$",
    )
    filetype: Optional[Literal["svg", "png"]] = Field(
        default=None,
        description="File format: svg or png (SVG does not accept size parameter)",
    )
    size: Optional[int] = Field(
        default=None,
        description="For PNG only, size in pixels (minimum 20, maximum 1200)",
        ge=20,
        le=1200,
    )

    @model_validator(mode="after")
    def _size_requires_png(self) -> "DownloadIconInput":
        if self.size is not None and self.filetype != "png":
            raise ValueError("size is only supported for png downloads")
        return self


# ─── Schema Rendering ────────────────────────────────────────────────────────

_JSON_TYPES: Dict[type, str] = {int: "number", float: "number", str: "string"}


def _json_type(values: Tuple[Any, ...]) -> Union[str, List[str]]:
    names: List[str] = []
    for value in values:
        name = _JSON_TYPES[value if isinstance(value, type) else type(value)]
        if name not in names:
            names.append(name)
    return names[0] if len(names) == 1 else names


def _property_schema(annotation: Any) -> Dict[str, Any]:
    """Render one field annotation as a JSON Schema property (type and enum)."""
    if get_origin(annotation) is Union:
        members = tuple(arg for arg in get_args(annotation) if arg is not type(None))
        if len(members) == 1:
            return _property_schema(members[0])
        return {"type": _json_type(members)}
    if get_origin(annotation) is Literal:
        values = get_args(annotation)
        return {"type": _json_type(values), "enum": list(values)}
    return {"type": _json_type((annotation,))}


def render_input_schema(model: Type[BaseModel]) -> Dict[str, Any]:
    """Render an input model as the JSON Schema object advertised to clients."""
    properties: Dict[str, Any] = {}
    required: List[str] = []
    for name, field in model.model_fields.items():
        prop = _property_schema(field.annotation)
        if field.description:
            prop["description"] = field.description
        properties[name] = prop
        if field.is_required():
            required.append(name)

    schema: Dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return schema


# ─── Descriptors ─────────────────────────────────────────────────────────────


class OperationDescriptor(BaseModel):
    """Static metadata for one tool: name, description, and argument model.

    ``handler`` names the NounProjectClient method that implements it.
    """
    model_config = ConfigDict(frozen=True)

    name: str
    title: str
    description: str
    input_model: Type[BaseModel]
    handler: str

    def input_schema(self) -> Dict[str, Any]:
        return render_input_schema(self.input_model)

    def annotations(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "readOnlyHint": True,
            "destructiveHint": False,
            "idempotentHint": True,
            "openWorldHint": True,
        }

    def parse_arguments(self, arguments: Optional[Mapping[str, Any]]) -> BaseModel:
        """Validate raw arguments into this operation's typed input model.

        Raises:
            ArgumentError: If a required argument is missing or a value is
                outside what the operation accepts.
        """
        try:
            return self.input_model.model_validate(dict(arguments or {}))
        except ValidationError as e:
            raise ArgumentError.from_validation_error(self.name, e) from e


OPERATIONS: Tuple[OperationDescriptor, ...] = (
    OperationDescriptor(
        name="search_icons",
        title="Search Icons",
        description=(
            "Search for icons on The Noun Project by keyword. Returns a paginated list of icons "
            "with metadata, thumbnails, and attribution info. Supports filtering by visual style "
            "(solid/line), line weight, and public domain status. Use this as the primary way to "
            "find icons for UI design, presentations, or documentation."
        ),
        input_model=SearchIconsInput,
        handler="search_icons",
    ),
    OperationDescriptor(
        name="get_icon",
        title="Get Icon Details",
        description=(
            "Get detailed information about a specific icon by its numeric ID. Returns full "
            "metadata including creator info, tags, license, and download URLs. Use this after "
            "search_icons to get complete details about a specific result."
        ),
        input_model=GetIconInput,
        handler="get_icon",
    ),
    OperationDescriptor(
        name="get_collection",
        title="Get Collection",
        description=(
            "Get a curated collection of icons by its ID. Returns collection metadata and the "
            "icons it contains. Collections are themed groups of icons (e.g., \"Weather Icons\", "
            "\"Business Icons\")."
        ),
        input_model=GetCollectionInput,
        handler="get_collection",
    ),
    OperationDescriptor(
        name="search_collections",
        title="Search Collections",
        description=(
            "Search for icon collections on The Noun Project by keyword. Returns paginated "
            "results of themed icon groups. Use this to discover curated sets of related icons."
        ),
        input_model=SearchCollectionsInput,
        handler="search_collections",
    ),
    OperationDescriptor(
        name="icon_autocomplete",
        title="Icon Autocomplete",
        description=(
            "Get autocomplete suggestions for icon search terms. Returns a list of popular "
            "search terms matching the input. Use this to help discover related keywords "
            "before performing a full search."
        ),
        input_model=AutocompleteInput,
        handler="autocomplete",
    ),
    OperationDescriptor(
        name="check_usage",
        title="Check API Usage",
        description=(
            "Check current Noun Project API usage and monthly quota. Returns usage count and "
            "remaining requests. Use this to monitor rate limits before making bulk requests."
        ),
        input_model=CheckUsageInput,
        handler="check_usage",
    ),
    OperationDescriptor(
        name="get_download_url",
        title="Get Download URL",
        description=(
            "Get a download URL for an icon with custom color and size options. Supports SVG "
            "and PNG formats. For PNG, you can specify pixel size (20-1200). For color, use hex "
            "values without the # prefix. Note: Free API access is limited to public domain "
            "icons only."
        ),
        input_model=DownloadIconInput,
        handler="get_download_url",
    ),
)


def list_operations() -> Tuple[OperationDescriptor, ...]:
    """Return every registered operation, in advertised order."""
    return OPERATIONS
