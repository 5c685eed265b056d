# =============================================================================
# core/models/schedule.py - Scheduled Generation and Pattern Schemas
# =============================================================================
# Scheduled generations run the article generator on chosen weekdays at a
# fixed time of day (5 minute grid) in the schedule's own timezone.
#
# Patterns are reusable prompts:
# - ArticlePattern: extra writing instructions for the body
# - ImagePromptPattern: prompt and size for the featured image
# =============================================================================

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator

IMAGE_SIZE_PATTERN = r"^(1024x1024|1792x1024|1024x1792)$"
TIME_OF_DAY_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


def _check_days(value: list[str] | None) -> list[str] | None:
    if value is None:
        return None
    if not value:
        raise ValueError("Select at least one day of the week")
    invalid = [day for day in value if day not in {"0", "1", "2", "3", "4", "5", "6"}]
    if invalid:
        raise ValueError(f"Invalid days of week: {', '.join(invalid)} (0 = Sunday ... 6 = Saturday)")
    return sorted(set(value))


def _check_time(value: str | None) -> str | None:
    if value is None:
        return None
    if int(value[3:5]) % 5 != 0:
        raise ValueError("time_of_day must be on a 5 minute boundary (e.g. 09:05)")
    return value


def _check_timezone(value: str | None) -> str | None:
    if value is None:
        return None
    try:
        ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(f"Unknown timezone '{value}'") from e
    return value


# =============================================================================
# Scheduled generations
# =============================================================================

class ScheduledGenerationCreate(BaseModel):
    """
    Schema for creating a schedule.

    Example:
        {
            "name": "平日朝の記事",
            "category_id": "...",
            "writer_id": "...",
            "image_prompt_pattern_id": "...",
            "days_of_week": ["1", "2", "3", "4", "5"],
            "time_of_day": "09:00",
            "timezone": "Asia/Tokyo"
        }
    """
    name: str = Field(..., min_length=1, max_length=200)
    category_id: str
    writer_id: str
    image_prompt_pattern_id: str
    pattern_id: str | None = None
    target_audience: str | None = None
    days_of_week: list[str] = Field(..., min_length=1)
    time_of_day: str = Field(..., pattern=TIME_OF_DAY_PATTERN)
    timezone: str = "Asia/Tokyo"
    is_active: bool = True

    @field_validator("days_of_week")
    @classmethod
    def validate_days(cls, value: list[str]) -> list[str]:
        return _check_days(value)

    @field_validator("time_of_day")
    @classmethod
    def validate_time(cls, value: str) -> str:
        return _check_time(value)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        return _check_timezone(value)


class ScheduledGenerationUpdate(BaseModel):
    """Schema for updating a schedule."""
    name: str | None = Field(default=None, min_length=1, max_length=200)
    category_id: str | None = None
    writer_id: str | None = None
    image_prompt_pattern_id: str | None = None
    pattern_id: str | None = None
    target_audience: str | None = None
    days_of_week: list[str] | None = None
    time_of_day: str | None = Field(default=None, pattern=TIME_OF_DAY_PATTERN)
    timezone: str | None = None
    is_active: bool | None = None

    @field_validator("days_of_week")
    @classmethod
    def validate_days(cls, value: list[str] | None) -> list[str] | None:
        return _check_days(value)

    @field_validator("time_of_day")
    @classmethod
    def validate_time(cls, value: str | None) -> str | None:
        return _check_time(value)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str | None) -> str | None:
        return _check_timezone(value)


class GenerationRequest(BaseModel):
    """Input for one advanced article generation."""
    category_id: str
    writer_id: str
    image_prompt_pattern_id: str
    pattern_id: str | None = None
    target_audience: str | None = None


# =============================================================================
# Patterns
# =============================================================================

class ArticlePatternCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    prompt: str = Field(..., min_length=1)


class ArticlePatternUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    prompt: str | None = Field(default=None, min_length=1)


class ImagePromptPatternCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    prompt: str = Field(..., min_length=1)
    size: str = Field(default="1792x1024", pattern=IMAGE_SIZE_PATTERN)


class ImagePromptPatternUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    prompt: str | None = Field(default=None, min_length=1)
    size: str | None = Field(default=None, pattern=IMAGE_SIZE_PATTERN)
