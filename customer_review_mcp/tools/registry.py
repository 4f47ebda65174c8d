"""
The static tool registry.

One row per tool: name, description, argument model and request shape.
Adding a tool means adding a row here; the dispatcher never branches on
tool names.
"""

from dataclasses import dataclass
from typing import Any

from customer_review_mcp.tools.arguments import (
    CreateCustomerReviewResponseArguments,
    DeleteCustomerReviewResponseArguments,
    GetAppInfoArguments,
    GetCustomerReviewResponseArguments,
    ListAppsArguments,
    ListBetaGroupsArguments,
    ListCustomerReviewsArguments,
    ListCustomerReviewsForVersionArguments,
    ListUsersArguments,
    ToolArguments,
)
from customer_review_mcp.tools.shapes import (
    DEFAULT_LIMIT,
    QueryParam,
    RequestShape,
    clamp_limit,
    joined,
)


@dataclass(frozen=True)
class ToolDefinition:
    name: str
    description: str
    arguments: type[ToolArguments]
    shape: RequestShape

    def input_schema(self) -> dict[str, Any]:
        return self.arguments.input_schema()


def _review_response_body(args: CreateCustomerReviewResponseArguments) -> dict[str, Any]:
    return {
        "data": {
            "type": "customerReviewResponses",
            "attributes": {
                "responseBody": args.response_body,
            },
            "relationships": {
                "review": {
                    "data": {
                        "id": args.review_id,
                        "type": "customerReviews",
                    }
                }
            },
        }
    }


DEFAULTED_LIMIT = QueryParam("limit", "limit", clamp_limit, default=DEFAULT_LIMIT)

CUSTOMER_REVIEW_QUERY = (
    QueryParam("filter[territory]", "filter_territory", joined),
    QueryParam("filter[rating]", "filter_rating", joined),
    QueryParam("exists[publishedResponse]", "exists_published_response"),
    QueryParam("sort", "sort", joined),
    QueryParam("fields[customerReviews]", "fields_customer_reviews", joined),
    QueryParam("fields[customerReviewResponses]", "fields_customer_review_responses", joined),
    QueryParam("limit", "limit", clamp_limit),
    QueryParam("include", "include", joined),
)

_DEFINITIONS = (
    ToolDefinition(
        name="list_apps",
        description="Get a list of all apps in App Store Connect",
        arguments=ListAppsArguments,
        shape=RequestShape("GET", "/apps", query=(DEFAULTED_LIMIT,)),
    ),
    ToolDefinition(
        name="get_app_info",
        description="Get detailed information about a specific app",
        arguments=GetAppInfoArguments,
        shape=RequestShape(
            "GET",
            "/apps/{app_id}",
            query=(QueryParam("include", "include", joined),),
        ),
    ),
    ToolDefinition(
        name="list_users",
        description="Get a list of all users registered on your App Store Connect team",
        arguments=ListUsersArguments,
        shape=RequestShape(
            "GET",
            "/users",
            query=(
                DEFAULTED_LIMIT,
                QueryParam("sort", "sort"),
                QueryParam("filter[username]", "filters.username"),
                QueryParam("filter[roles]", "filters.roles", joined),
                QueryParam("filter[visibleApps]", "filters.visible_apps", joined),
                QueryParam("include", "include", joined),
            ),
        ),
    ),
    ToolDefinition(
        name="list_customer_reviews",
        description="List all customer reviews for an app.",
        arguments=ListCustomerReviewsArguments,
        shape=RequestShape("GET", "/apps/{app_id}/customerReviews", query=CUSTOMER_REVIEW_QUERY),
    ),
    ToolDefinition(
        name="list_customer_reviews_for_version",
        description="List all customer reviews for a specific App Store Version.",
        arguments=ListCustomerReviewsForVersionArguments,
        shape=RequestShape(
            "GET",
            "/appStoreVersions/{version_id}/customerReviews",
            query=CUSTOMER_REVIEW_QUERY,
        ),
    ),
    ToolDefinition(
        name="create_customer_review_response",
        description=(
            "Create a response or replace an existing response you wrote to a customer review."
        ),
        arguments=CreateCustomerReviewResponseArguments,
        shape=RequestShape("POST", "/customerReviewResponses", body=_review_response_body),
    ),
    ToolDefinition(
        name="delete_customer_review_response",
        description="Delete a response to a customer review.",
        arguments=DeleteCustomerReviewResponseArguments,
        shape=RequestShape(
            "DELETE",
            "/customerReviewResponses/{response_id}",
            confirmation="Customer review response {response_id} deleted successfully.",
        ),
    ),
    ToolDefinition(
        name="get_customer_review_response",
        description="Get the response to a specific customer review.",
        arguments=GetCustomerReviewResponseArguments,
        shape=RequestShape("GET", "/customerReviews/{review_id}/response"),
    ),
    ToolDefinition(
        name="list_beta_groups",
        description=(
            "Get a list of all TestFlight beta groups, including their app and beta testers"
        ),
        arguments=ListBetaGroupsArguments,
        shape=RequestShape(
            "GET",
            "/betaGroups",
            query=(DEFAULTED_LIMIT,),
            fixed_params={"include": "app,betaTesters"},
        ),
    ),
)

TOOLS: dict[str, ToolDefinition] = {definition.name: definition for definition in _DEFINITIONS}
