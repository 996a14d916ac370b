from usage.models import UsageRecord

INPUT_TYPE_BY_MODE = {
    "photo2avatar": "image",
    "text2avatar": "text",
}


def record_usage(*, user, generation_mode: str, style: str, credits_charged: int,
                 estimated_tokens: int, used_free: bool, image_path: str = "") -> UsageRecord:
    """
    Enregistre une génération réussie. credits_charged est forcé à 0 si used_free.
    """
    return UsageRecord.objects.create(
        user=user,
        generation_mode=generation_mode,
        input_type=INPUT_TYPE_BY_MODE.get(generation_mode, "image"),
        style=style,
        image_path=image_path or "",
        credits_charged=0 if used_free else credits_charged,
        estimated_tokens=estimated_tokens,
        used_free=used_free,
    )
