from __future__ import annotations

from pydantic import BaseModel, Field


class APIResponse(BaseModel):
    ok: bool = True
    data: dict | None = None
    error: dict | None = None


class HealthResponse(BaseModel):
    status: str = "ok"
    timestamp: str
    version: str


class SizedURL(BaseModel):
    size: int
    max_dimension: int = Field(..., serialization_alias="maxDimension")
    url: str


class RasterFormat(BaseModel):
    sizes: list[SizedURL]
    dynamic: str


class VersionFormats(BaseModel):
    svg: dict[str, str]
    png: RasterFormat
    webp: RasterFormat


class LogoVersion(BaseModel):
    name: str
    formats: VersionFormats


class LogoCapabilities(BaseModel):
    color_customization: bool = Field(..., serialization_alias="colorCustomization")
    formats: list[str]
    standard_sizes: list[int] = Field(..., serialization_alias="standardSizes")
    dynamic_sizing: bool = Field(True, serialization_alias="dynamicSizing")


class LogoDetail(BaseModel):
    id: str
    name: str | None = None
    title: str | None = None
    website: str | None = None
    colors: dict | list | None = None
    versions: list[LogoVersion]
    capabilities: LogoCapabilities


class LogoSummary(BaseModel):
    id: str
    name: str | None = None
    title: str | None = None
    category: str | None = None
    tags: list[str] = []
    versions: list[str]
    formats: list[str]
    color_customization: bool = Field(..., serialization_alias="colorCustomization")
    url: str


class ListCapabilities(BaseModel):
    formats: list[str]
    dynamic_conversion: bool = Field(True, serialization_alias="dynamicConversion")
    color_customization: bool = Field(True, serialization_alias="colorCustomization")
    search_enabled: bool = Field(True, serialization_alias="searchEnabled")
    standard_sizes: list[int] = Field(..., serialization_alias="standardSizes")


class LogoListResponse(BaseModel):
    total: int
    page: int
    limit: int
    logos: list[LogoSummary]
    categories: list[str] = []
    capabilities: ListCapabilities
    message: str | None = None
