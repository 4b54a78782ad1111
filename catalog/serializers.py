"""
Serializers for catalog app
"""
from rest_framework import serializers
from .models import LessonPackage


class LessonPackageSerializer(serializers.ModelSerializer):
    scheduleCode = serializers.CharField(source='schedule_code', read_only=True)
    lessonsCount = serializers.IntegerField(source='lessons_count', read_only=True, allow_null=True)

    class Meta:
        model = LessonPackage
        fields = ['id', 'code', 'title', 'price', 'scheduleCode', 'lessonsCount']
        read_only_fields = fields

    def to_representation(self, instance):
        data = super().to_representation(instance)
        if data.get('price') is not None:
            data['price'] = float(data['price'])
        return data
