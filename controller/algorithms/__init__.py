"""Allocation algorithms"""

from .nearest_idle_car import NearestIdleCarStrategy

__all__ = ['NearestIdleCarStrategy']
