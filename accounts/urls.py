from django.urls import path

from .views.auth import LoginView, SignupView

urlpatterns = [
    path("signup", SignupView.as_view(), name="auth-signup"),
    path("login", LoginView.as_view(), name="auth-login"),
]
