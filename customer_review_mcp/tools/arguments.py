"""
Typed argument records, one per tool.

Each model is the validated form of a tool's raw MCP argument mapping.
Wire names are camelCase (``appId``, ``filterTerritory``) through the alias
generator; Python code uses the snake_case attributes. Unknown keys are
ignored. Validation failures never reach the network: the dispatcher turns
them into InvalidParamsError.

The same models generate the JSON schemas advertised in ``tools/list``.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, StrictBool
from pydantic.alias_generators import to_camel
from pydantic.json_schema import GenerateJsonSchema, JsonSchemaValue
from pydantic_core import core_schema

AppInclude = Literal[
    "appClips",
    "appInfos",
    "appStoreVersions",
    "availableTerritories",
    "betaAppReviewDetail",
    "betaGroups",
    "betaLicenseAgreement",
    "builds",
    "endUserLicenseAgreement",
    "gameCenterEnabledVersions",
    "inAppPurchases",
    "preOrder",
    "prices",
    "reviewSubmissions",
]

UserRole = Literal[
    "ADMIN",
    "FINANCE",
    "TECHNICAL",
    "SALES",
    "MARKETING",
    "DEVELOPER",
    "ACCOUNT_HOLDER",
    "READ_ONLY",
    "APP_MANAGER",
    "ACCESS_TO_REPORTS",
    "CUSTOMER_SUPPORT",
]

UserSort = Literal[
    "username", "-username",
    "firstName", "-firstName",
    "lastName", "-lastName",
    "roles", "-roles",
]

ReviewSort = Literal["rating", "-rating", "createdDate", "-createdDate"]

ReviewField = Literal[
    "rating", "title", "body", "reviewerNickname", "createdDate", "territory", "response"
]

ReviewResponseField = Literal["responseBody", "lastModifiedDate", "state", "review"]


class ToolInputSchema(GenerateJsonSchema):
    """
    JSON schema generator for tool inputs.

    Optional arguments are advertised by their real type and simply left
    out of ``required``, the way MCP clients expect, instead of as
    ``anyOf [T, null]`` with a null default.
    """

    def nullable_schema(self, schema: core_schema.NullableSchema) -> JsonSchemaValue:
        return self.generate_inner(schema["schema"])

    def default_schema(self, schema: core_schema.WithDefaultSchema) -> JsonSchemaValue:
        json_schema = super().default_schema(schema)
        if json_schema.get("default", ...) is None:
            json_schema.pop("default")
        return json_schema

    def field_title_should_be_set(self, schema) -> bool:
        return False


class ToolArguments(BaseModel):
    """Base for all tool argument records."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    @classmethod
    def input_schema(cls) -> dict[str, Any]:
        """JSON schema for the MCP ``inputSchema`` field."""
        schema = cls.model_json_schema(by_alias=True, schema_generator=ToolInputSchema)
        schema.pop("title", None)
        schema.pop("description", None)
        return schema


def _limit_field(description: str) -> Any:
    return Field(default=None, description=description)


class ListAppsArguments(ToolArguments):
    limit: int | None = _limit_field("Maximum number of apps to return (default: 100, max: 200)")


class GetAppInfoArguments(ToolArguments):
    app_id: str = Field(min_length=1, description="The ID of the app to get information for")
    include: list[AppInclude] | None = Field(
        default=None, description="Optional relationships to include in the response"
    )


class UserFilter(BaseModel):
    """Filters for list_users."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore", frozen=True)

    username: str | None = Field(default=None, description="Filter by username")
    roles: list[UserRole] | None = Field(default=None, description="Filter by user roles")
    visible_apps: list[str] | None = Field(
        default=None, description="Filter by apps the user can see (app IDs)"
    )


class ListUsersArguments(ToolArguments):
    limit: int | None = _limit_field("Maximum number of users to return (default: 100, max: 200)")
    sort: UserSort | None = Field(default=None, description="Sort order for the results")
    filters: UserFilter | None = Field(default=None, alias="filter")
    include: list[Literal["visibleApps"]] | None = Field(
        default=None, description="Related resources to include in the response"
    )


class CustomerReviewQuery(ToolArguments):
    """Query options shared by both customer review listings."""

    filter_territory: list[str] | None = Field(
        default=None, description="Filter by territory (ISO country code)"
    )
    filter_rating: list[str] | None = Field(default=None, description="Filter by rating (1-5)")
    exists_published_response: StrictBool | None = Field(
        default=None, description="Filter by published response existence"
    )
    sort: list[ReviewSort] | None = Field(default=None, description="Sort expressions")
    fields_customer_reviews: list[ReviewField] | None = Field(
        default=None, description="Fields to include for customerReviews"
    )
    fields_customer_review_responses: list[ReviewResponseField] | None = Field(
        default=None, description="Fields to include for customerReviewResponses"
    )
    limit: int | None = _limit_field("Maximum resources per page (max 200)")
    include: list[Literal["response"]] | None = Field(
        default=None, description="Relationships to include"
    )


class ListCustomerReviewsArguments(CustomerReviewQuery):
    app_id: str = Field(min_length=1, description="The ID of the app to get customer reviews for.")


class ListCustomerReviewsForVersionArguments(CustomerReviewQuery):
    version_id: str = Field(
        min_length=1,
        description="The ID of the App Store Version to get customer reviews for.",
    )


class CreateCustomerReviewResponseArguments(ToolArguments):
    review_id: str = Field(min_length=1, description="The ID of the customer review to respond to.")
    response_body: str = Field(min_length=1, description="The response text to the customer review.")


class DeleteCustomerReviewResponseArguments(ToolArguments):
    response_id: str = Field(
        min_length=1, description="The ID of the customer review response to delete."
    )


class GetCustomerReviewResponseArguments(ToolArguments):
    review_id: str = Field(
        min_length=1, description="The ID of the customer review to get the response for."
    )


class ListBetaGroupsArguments(ToolArguments):
    limit: int | None = _limit_field("Maximum number of beta groups to return (default: 100, max: 200)")
