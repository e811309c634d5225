from django.core.exceptions import ValidationError

from ..exceptions import NotFound, ValidationFailed


def get_row(queryset, pk, label):
    try:
        return queryset.get(pk=pk)
    except (queryset.model.DoesNotExist, ValidationError, ValueError):
        # malformed UUIDs land here too
        raise NotFound(f"{label} not found")


def pick_fields(data, allowed):
    unknown = sorted(set(data) - set(allowed))
    if unknown:
        raise ValidationFailed(f"Unknown fields: {', '.join(unknown)}")
    return {k: v for k, v in data.items() if k in allowed}


def save_row(instance, **kwargs):
    try:
        instance.full_clean()
    except ValidationError as e:
        raise ValidationFailed(_flatten(e))
    instance.save(**kwargs)
    return instance


def _flatten(error):
    if hasattr(error, 'message_dict'):
        return '; '.join(f"{field}: {' '.join(msgs)}" for field, msgs in error.message_dict.items())
    return ' '.join(error.messages)
