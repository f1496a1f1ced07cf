"""
Serializers for forms and their published versions.
"""
import logging

from django.conf import settings
from django.core.cache import cache
from rest_framework import serializers
from rest_framework.fields import DateTimeField, DecimalField, IntegerField

from .models import Form, FormVersion, RubricQuestion, RubricVersion

logger = logging.getLogger(__name__)  # pylint: disable=invalid-name


class RubricQuestionSerializer(serializers.ModelSerializer):
    """Serializer for :class:`RubricQuestion`"""

    weight = DecimalField(max_digits=5, decimal_places=4, min_value=0, max_value=1, coerce_to_string=False)

    class Meta:
        model = RubricQuestion
        fields = ('question_id', 'label', 'description', 'weight', 'required', 'order_num')
        extra_kwargs = {'order_num': {'required': False}}


class RubricVersionSerializer(serializers.ModelSerializer):
    """Serializer for :class:`RubricVersion`."""
    questions = RubricQuestionSerializer(required=True, many=True)
    scale_min = IntegerField(default=1)
    scale_max = IntegerField(default=5)
    scale_step = IntegerField(default=1)
    published_at = DateTimeField(format=None, read_only=True)

    class Meta:
        model = RubricVersion
        fields = ('id', 'form', 'version', 'scale_min', 'scale_max', 'scale_step', 'published_at', 'questions')
        read_only_fields = ('id', 'form', 'version')

    def validate_questions(self, value):
        """Make sure we have at least one question and that identifiers are unique."""
        if not value:
            raise serializers.ValidationError("Rubric must have at least one question")

        question_ids = [question['question_id'] for question in value]
        duplicates = sorted({qid for qid in question_ids if question_ids.count(qid) > 1})
        if duplicates:
            raise serializers.ValidationError(
                "Duplicate question ids: {}".format(", ".join(duplicates))
            )
        return value

    def validate_scale_step(self, value):
        if value <= 0:
            raise serializers.ValidationError("Scale step must be positive")
        return value

    def validate(self, attrs):
        if attrs['scale_min'] > attrs['scale_max']:
            raise serializers.ValidationError({'scale_max': "Scale max must not be less than scale min"})
        return attrs

    @classmethod
    def serialized_from_cache(cls, rubric_version):
        """For a given `RubricVersion`, return a serialized version.

        Rubric versions are never modified after they're written,
        so the serialized form is cached by primary key.
        """
        cache_key = f"RubricVersionSerializer.serialized_from_cache.{rubric_version.pk}"
        rubric_dict = cache.get(cache_key)
        if rubric_dict:
            return rubric_dict

        rubric_dict = cls(rubric_version).data
        timeout = getattr(settings, 'FORMREVIEW_RUBRIC_CACHE_TIMEOUT', 60 * 60 * 8)
        cache.set(cache_key, rubric_dict, timeout)
        return rubric_dict

    def create(self, validated_data):
        """
        Create the rubric version, including its questions.

        The caller passes `form` and `version` as extra keyword arguments to `save()`.
        """
        questions_data = validated_data.pop("questions")
        rubric_version = RubricVersion.objects.create(**validated_data)
        questions = []
        for order_num, question_dict in enumerate(questions_data):
            question_dict.setdefault('order_num', order_num)
            questions.append(RubricQuestion(rubric_version=rubric_version, **question_dict))
        RubricQuestion.objects.bulk_create(questions)
        return rubric_version


class FormVersionSerializer(serializers.ModelSerializer):
    """Serializer for :class:`FormVersion`."""
    published_at = DateTimeField(format=None, read_only=True)

    class Meta:
        model = FormVersion
        fields = ('id', 'form', 'version', 'schema', 'published_at', 'notes')
        read_only_fields = ('id', 'form', 'version')

    def validate_schema(self, value):
        """A published form must ask for at least one field."""
        if not isinstance(value, dict) or not value.get('fields'):
            raise serializers.ValidationError("Form must have at least one field")
        return value


class FormSerializer(serializers.ModelSerializer):
    """Serializer for :class:`Form`."""

    class Meta:
        model = Form
        fields = (
            'id',
            'organization',
            'name',
            'slug',
            'status',
            'min_reviews_required',
            'visibility_mode',
            'visibility_threshold',
        )
        read_only_fields = ('id', 'organization')

    def validate_min_reviews_required(self, value):
        if value < 1:
            raise serializers.ValidationError("At least one review must be required")
        return value
