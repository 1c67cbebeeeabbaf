"""Serializers de Lecturas"""

from rest_framework import serializers


class TemperatureField(serializers.FloatField):
    """Temperatura en °C, opcional"""

    def __init__(self, **kwargs):
        kwargs.setdefault('required', False)
        kwargs.setdefault('allow_null', True)
        kwargs.setdefault('min_value', -100)
        kwargs.setdefault('max_value', 100)
        super().__init__(**kwargs)


class ReadingCreateSerializer(serializers.Serializer):
    """Entrada para registrar una lectura"""

    timestamp = serializers.DateTimeField()
    minTemperature = TemperatureField()
    maxTemperature = TemperatureField()

    def validate(self, attrs):
        min_temp = attrs.get('minTemperature')
        max_temp = attrs.get('maxTemperature')

        if min_temp is None and max_temp is None:
            raise serializers.ValidationError(
                'Se requiere al menos una temperatura (mínima o máxima)'
            )
        if min_temp is not None and max_temp is not None and min_temp > max_temp:
            raise serializers.ValidationError({
                'minTemperature': 'La temperatura mínima debe ser menor o igual que la máxima'
            })
        return attrs


class ReadingSerializer(serializers.Serializer):
    """Lectura vigente (desde Reading)"""

    id = serializers.CharField()
    ownerUserId = serializers.CharField(source='owner_user_id')
    timestamp = serializers.DateTimeField(allow_null=True)
    period = serializers.CharField()
    minTemperature = serializers.FloatField(source='min_temperature', allow_null=True)
    maxTemperature = serializers.FloatField(source='max_temperature', allow_null=True)
    averageTemperature = serializers.FloatField(source='average_temperature', allow_null=True)
    addedByUserId = serializers.CharField(source='added_by_user_id', allow_null=True)
    addedByUserName = serializers.CharField(source='added_by_user_name', allow_null=True)


class FirestoreTimestampField(serializers.Field):
    """Timestamp de Firestore; los valores no resueltos se devuelven como null"""

    def to_representation(self, value):
        if hasattr(value, 'isoformat'):
            return value.isoformat()
        return None


class DeletedReadingSerializer(serializers.Serializer):
    """Lectura eliminada (desde el documento de deletedTemperatures)"""

    id = serializers.CharField()
    ownerUserId = serializers.CharField(allow_null=True, default=None)
    timestamp = FirestoreTimestampField(default=None)
    period = serializers.CharField(default='other')
    minTemperature = serializers.FloatField(allow_null=True, default=None)
    maxTemperature = serializers.FloatField(allow_null=True, default=None)
    averageTemperature = serializers.FloatField(allow_null=True, default=None)
    addedByUserId = serializers.CharField(allow_null=True, default=None)
    addedByUserName = serializers.CharField(allow_null=True, default=None)
    createdAt = FirestoreTimestampField(default=None)
    deletedAt = FirestoreTimestampField(default=None)
    originalLogId = serializers.CharField()
    deletedByUserId = serializers.CharField()
    deletedByUserName = serializers.CharField(allow_null=True, default=None)
