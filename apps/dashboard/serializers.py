"""Serializers del Dashboard - Agregados diarios y resúmenes mensuales"""

from rest_framework import serializers


class DailyAggregateSerializer(serializers.Serializer):
    """Un día del gráfico: promedio, mínimo y máximo de mañana y tarde"""

    date = serializers.DateField()
    morningTemperature = serializers.FloatField(source='morning.mean', allow_null=True)
    morningMinTemperature = serializers.FloatField(source='morning.min', allow_null=True)
    morningMaxTemperature = serializers.FloatField(source='morning.max', allow_null=True)
    eveningTemperature = serializers.FloatField(source='evening.mean', allow_null=True)
    eveningMinTemperature = serializers.FloatField(source='evening.min', allow_null=True)
    eveningMaxTemperature = serializers.FloatField(source='evening.max', allow_null=True)


class MonthlySummarySerializer(serializers.Serializer):
    average = serializers.FloatField(allow_null=True)
    min = serializers.FloatField(allow_null=True)
    max = serializers.FloatField(allow_null=True)
    count = serializers.IntegerField()


class FridgeAnalysisRequestSerializer(serializers.Serializer):
    """Entrada del análisis IA"""

    year = serializers.IntegerField(min_value=1, max_value=9999)
    month = serializers.IntegerField(min_value=1, max_value=12)
    fridgeObservations = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, max_length=4000
    )
    monthYear = serializers.CharField(required=False, max_length=50)
