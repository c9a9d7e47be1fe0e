from django.apps import AppConfig


class SwimmeetConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "swimmeet"
    verbose_name = "Swim Meets"
