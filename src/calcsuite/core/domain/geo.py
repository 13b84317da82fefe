"""
Geo — Модели географических точек и остановок маршрута

Immutable Pydantic модели для входов калькуляторов расстояния.
"""

from pydantic import BaseModel, Field


class GeoPoint(BaseModel):
    """Точка на поверхности Земли (градусы)."""

    latitude: float = Field(..., ge=-90, le=90, description="Широта, градусы")
    longitude: float = Field(..., ge=-180, le=180, description="Долгота, градусы")

    model_config = {"frozen": True}


class RouteStop(GeoPoint):
    """
    Остановка многоточечного маршрута.

    Порядок остановок в списке определяет порядок участков маршрута.
    """

    name: str = Field(..., min_length=1, description="Название остановки")
