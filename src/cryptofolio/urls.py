"""cryptofolio URL Configuration

The `urlpatterns` list routes URLs to views. For more information please see:
    https://docs.djangoproject.com/en/5.1/topics/http/urls/
"""

from django.contrib import admin
from django.urls import include, path
from rest_framework import routers

import staking.views

router = routers.DefaultRouter()

router.register(
    r"staking_plan",
    staking.views.StakingPlanViewSet,
    basename="staking_plan",
)

router.register(
    r"staking_position",
    staking.views.StakingPositionViewSet,
    basename="staking_position",
)

urlpatterns = [
    path("api/", include(router.urls)),
    path("admin/", admin.site.urls),
]
