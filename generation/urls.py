from django.urls import path

from generation.views.generate import GenerateAvatarView

urlpatterns = [
    path("generate-avatar", GenerateAvatarView.as_view(), name="ai-generate-avatar"),
]
