"""REST API error response models.

Documents the structured body every error handler returns.
"""

from pydantic import BaseModel, ConfigDict


class ErrorDetail(BaseModel):
    """Field-level error detail."""

    field: str
    message: str
    code: str | None = None


class ErrorResponse(BaseModel):
    """Structured error response format.

    Examples:
        Wrong webhook secret:
            {
                "detail": "Invalid revalidation secret",
                "code": "UNAUTHORIZED"
            }

        Inventory backend down:
            {
                "detail": "Inventory search failed",
                "code": "UPSTREAM_ERROR"
            }
    """

    detail: str
    code: str | None = None
    errors: list[ErrorDetail] | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {"detail": "Invalid revalidation secret", "code": "UNAUTHORIZED"},
                {
                    "detail": "Validation failed",
                    "code": "VALIDATION_ERROR",
                    "errors": [
                        {
                            "field": "items_per_page",
                            "message": "items_per_page must be between 1 and 200",
                        }
                    ],
                },
            ]
        }
    )
