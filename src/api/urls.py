"""Main API URL router for /api/v1/."""
from django.urls import include, path
from rest_framework.routers import DefaultRouter
from rest_framework_simplejwt.views import (
    TokenBlacklistView,
    TokenObtainPairView,
    TokenRefreshView,
)

from api.v1 import daily_stat_views
from api.v1 import views as v1_views
from targets import target_views

router = DefaultRouter()
router.register(r'employees', v1_views.EmployeeViewSet, basename='employee')
router.register(r'courses', v1_views.CourseViewSet, basename='course')
router.register(r'course-fees', v1_views.CourseFeeViewSet, basename='course-fee')
router.register(r'course-enrollments', v1_views.CourseEnrollmentViewSet, basename='course-enrollment')
router.register(r'service-sales', v1_views.ServiceSaleViewSet, basename='service-sale')
router.register(r'daily-stats', daily_stat_views.DailyStatViewSet, basename='daily-stat')
router.register(r'employee-targets', target_views.EmployeeTargetViewSet, basename='employee-target')
router.register(r'employee-rewards', target_views.EmployeeRewardViewSet, basename='employee-reward')
router.register(r'target-alerts', v1_views.TargetAlertViewSet, basename='target-alert')


app_name = 'api'
urlpatterns = [
    path('', include(router.urls)),
    path('auth/token/', TokenObtainPairView.as_view(), name='token-obtain'),
    path('auth/token/refresh/', TokenRefreshView.as_view(), name='token-refresh'),
    path('auth/logout/', TokenBlacklistView.as_view(), name='token-blacklist'),
    path('auth/me/', v1_views.MeView.as_view(), name='me'),
]
