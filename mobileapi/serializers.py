"""
Serializers for Mobile API
Input validation for the endpoints and the resource shapes returned to the mobile apps
"""
from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction
from rest_framework import serializers
from rest_framework.validators import UniqueValidator

from apps.common import content_moderation
from apps.common.models import Banner
from apps.moderation.models import Report
from apps.notifications.models import Notification
from apps.reviews.models import Review, ReviewProof, StoreReply
from apps.stores.models import (
    RISK_LEVEL_CHOICES,
    Category,
    Store,
    StoreClaimRequest,
    StoreContact,
    StoreLink,
    StoreOwner,
)

from .constants import (
    ALLOWED_AVATAR_TYPES,
    ALLOWED_LOGO_TYPES,
    ALLOWED_PROOF_TYPES,
    MAX_RATING,
    MAX_REPLY_LENGTH,
    MAX_REVIEW_LENGTH,
    MIN_RATING,
    MIN_REVIEW_LENGTH,
)
from .utils import avatar_url, file_to_data_url

User = get_user_model()

REPORTABLE_MODELS = {
    'review': Review,
    'reply': StoreReply,
    'store': Store,
}


def validate_upload(file, allowed_types, max_size, type_message, size_message):
    """Check the content type and size of an uploaded image"""
    content_type = getattr(file, 'content_type', None)
    if content_type not in allowed_types:
        raise serializers.ValidationError(type_message)
    if file.size > max_size:
        raise serializers.ValidationError(size_message)
    return file


def moderated_text(value):
    """Reject banned words and strip HTML"""
    valid, message, sanitized = content_moderation.validate(value)
    if not valid:
        raise serializers.ValidationError(message)
    return sanitized


def rating(value):
    return round(float(value or 0), 1)


# ============================================================================
# User & Authentication Serializers
# ============================================================================

class UserSerializer(serializers.ModelSerializer):
    """Authenticated user as returned by the auth endpoints"""
    email_verified = serializers.SerializerMethodField()
    avatar = serializers.SerializerMethodField()
    created_at = serializers.DateTimeField(source='date_joined', read_only=True)

    class Meta:
        model = User
        fields = ['id', 'name', 'email', 'phone', 'email_verified', 'avatar', 'created_at']

    def get_email_verified(self, obj):
        return obj.has_verified_email()

    def get_avatar(self, obj):
        return avatar_url(obj)


class RegisterSerializer(serializers.Serializer):
    """Serializer for user registration"""
    name = serializers.CharField(max_length=255)
    email = serializers.EmailField(
        max_length=255,
        required=False,
        allow_null=True,
        allow_blank=True,
        validators=[UniqueValidator(queryset=User.objects.all(), message='The email has already been taken.', lookup='iexact')],
    )
    phone = serializers.CharField(
        max_length=20,
        required=False,
        allow_null=True,
        allow_blank=True,
        validators=[UniqueValidator(queryset=User.objects.all(), message='The phone has already been taken.')],
    )
    password = serializers.CharField(write_only=True, min_length=8)
    password_confirmation = serializers.CharField(write_only=True, required=False, allow_blank=True)

    def validate(self, attrs):
        attrs['email'] = attrs.get('email') or None
        attrs['phone'] = attrs.get('phone') or None

        errors = {}
        if attrs['password'] != attrs.get('password_confirmation'):
            errors['password'] = ['The password field confirmation does not match.']
        if not attrs['email'] and not attrs['phone']:
            errors['email'] = ['Either email or phone is required.']
            errors['phone'] = ['Either email or phone is required.']
        if errors:
            raise serializers.ValidationError(errors)
        return attrs

    def create(self, validated_data):
        validated_data.pop('password_confirmation', None)
        return User.objects.create_user(
            email=validated_data['email'],
            password=validated_data['password'],
            name=validated_data['name'],
            phone=validated_data['phone'],
        )


class LoginSerializer(serializers.Serializer):
    email = serializers.CharField(required=False, allow_blank=True)
    phone = serializers.CharField(required=False, allow_blank=True)
    password = serializers.CharField(write_only=True)

    def validate(self, attrs):
        if not attrs.get('email') and not attrs.get('phone'):
            raise serializers.ValidationError({
                'email': ['The email field is required when phone is not present.'],
            })
        return attrs


class UpdateProfileSerializer(serializers.ModelSerializer):
    """Name and phone, the phone stays unique across accounts"""

    class Meta:
        model = User
        fields = ['name', 'phone']
        extra_kwargs = {
            'name': {'required': False},
            'phone': {'required': False},
        }

    def validate_phone(self, value):
        return value or None


class AvatarUploadSerializer(serializers.Serializer):
    avatar = serializers.ImageField()

    def validate_avatar(self, value):
        return validate_upload(
            value,
            ALLOWED_AVATAR_TYPES,
            settings.MAX_AVATAR_SIZE,
            'The avatar must be a file of type: jpeg, png, jpg.',
            'The avatar must not be greater than 2048 kilobytes.',
        )


class VerifyCodeSerializer(serializers.Serializer):
    code = serializers.RegexField(
        r'^\d{6}$',
        error_messages={'invalid': 'The code must be 6 digits.'},
    )


# ============================================================================
# Category & Banner Serializers
# ============================================================================

class CategorySerializer(serializers.ModelSerializer):
    name = serializers.CharField(read_only=True)
    is_high_risk = serializers.BooleanField(read_only=True)
    stores_count = serializers.SerializerMethodField()

    class Meta:
        model = Category
        fields = [
            'id',
            'name',
            'name_ar',
            'name_fr',
            'name_en',
            'slug',
            'risk_level',
            'is_high_risk',
            'icon_key',
            'show_on_home',
            'stores_count',
        ]

    def get_stores_count(self, obj):
        return getattr(obj, 'stores_count', 0)


class RiskLevelSerializer(serializers.Serializer):
    risk_level = serializers.ChoiceField(choices=RISK_LEVEL_CHOICES)


class BannerSerializer(serializers.ModelSerializer):
    """Banner localized by the `locale` passed in the serializer context"""
    title = serializers.SerializerMethodField()
    subtitle = serializers.SerializerMethodField()
    image_url = serializers.CharField(source='full_image_url', read_only=True)

    class Meta:
        model = Banner
        fields = ['id', 'title', 'subtitle', 'image_url', 'background_color', 'link_type', 'link_value']

    def get_title(self, obj):
        return obj.get_localized_title(self.context.get('locale', 'en'))

    def get_subtitle(self, obj):
        return obj.get_localized_subtitle(self.context.get('locale', 'en'))


# ============================================================================
# Store Serializers
# ============================================================================

class StoreLinkSerializer(serializers.ModelSerializer):
    platform_label = serializers.CharField(read_only=True)

    class Meta:
        model = StoreLink
        fields = ['id', 'platform', 'platform_label', 'url', 'handle']


class StoreContactSerializer(serializers.ModelSerializer):

    class Meta:
        model = StoreContact
        fields = ['whatsapp', 'phone']


class StoreListSerializer(serializers.ModelSerializer):
    """Compact store card used in lists"""
    logo = serializers.CharField(source='full_logo_url', read_only=True)
    avg_rating = serializers.SerializerMethodField()
    reviews_count = serializers.IntegerField(source='reviews_count_cache', read_only=True)
    categories = CategorySerializer(many=True, read_only=True)

    class Meta:
        model = Store
        fields = ['id', 'name', 'slug', 'city', 'logo', 'is_verified', 'avg_rating', 'reviews_count', 'categories']

    def get_avg_rating(self, obj):
        return rating(obj.avg_rating_cache)


class StoreDetailSerializer(StoreListSerializer):
    """Full store page, `is_owner` is computed for the requesting user"""
    is_owner = serializers.SerializerMethodField()
    is_high_risk = serializers.SerializerMethodField()
    links = StoreLinkSerializer(many=True, read_only=True)
    contacts = serializers.SerializerMethodField()

    class Meta:
        model = Store
        fields = [
            'id',
            'name',
            'slug',
            'description',
            'city',
            'logo',
            'status',
            'is_verified',
            'is_owner',
            'avg_rating',
            'reviews_count',
            'is_high_risk',
            'categories',
            'links',
            'contacts',
            'created_at',
        ]

    def get_is_owner(self, obj):
        request = self.context.get('request')
        if request is None or not request.user.is_authenticated:
            return False
        return request.user.is_owner_of(obj)

    def get_is_high_risk(self, obj):
        return any(category.is_high_risk for category in obj.categories.all())

    def get_contacts(self, obj):
        try:
            contacts = obj.contacts
        except StoreContact.DoesNotExist:
            return None
        return StoreContactSerializer(contacts).data


class StoreSummarySerializer(serializers.ModelSerializer):
    avg_rating = serializers.SerializerMethodField()
    reviews_count = serializers.IntegerField(source='reviews_count_cache', read_only=True)
    rating_breakdown = serializers.SerializerMethodField()
    proof_badge = serializers.SerializerMethodField()

    class Meta:
        model = Store
        fields = ['avg_rating', 'reviews_count', 'is_verified', 'rating_breakdown', 'proof_badge']

    def get_avg_rating(self, obj):
        return rating(obj.avg_rating_cache)

    def get_rating_breakdown(self, obj):
        return obj.rating_breakdown()

    def get_proof_badge(self, obj):
        return obj.has_approved_proofs()


class StoreOwnerSerializer(StoreDetailSerializer):
    """Store as seen by one of its owners"""
    owner_role = serializers.SerializerMethodField()
    claim_status = serializers.SerializerMethodField()
    pending_reviews_count = serializers.SerializerMethodField()

    class Meta:
        model = Store
        fields = [
            'id',
            'name',
            'slug',
            'description',
            'city',
            'logo',
            'status',
            'is_verified',
            'avg_rating',
            'reviews_count',
            'owner_role',
            'claim_status',
            'pending_reviews_count',
            'is_high_risk',
            'categories',
            'links',
            'contacts',
            'created_at',
            'updated_at',
        ]

    def _user(self):
        request = self.context.get('request')
        if request is None or not request.user.is_authenticated:
            return None
        return request.user

    def get_owner_role(self, obj):
        user = self._user()
        if user is None:
            return None
        ownership = StoreOwner.objects.filter(store=obj, user=user).first()
        return ownership.role if ownership else None

    def get_claim_status(self, obj):
        user = self._user()
        if user is None:
            return None
        claim = obj.claim_requests.filter(user=user).order_by('-created_at', '-id').first()
        return claim.status if claim else None

    def get_pending_reviews_count(self, obj):
        return obj.reviews.filter(status='pending').count()


class LinkInputSerializer(serializers.Serializer):
    platform = serializers.ChoiceField(
        choices=StoreLink.PLATFORM_CHOICES,
        error_messages={'required': 'Each link must have a platform.'},
    )
    url = serializers.CharField(
        max_length=500,
        error_messages={'required': 'Each link must have a URL or handle.'},
    )
    handle = serializers.CharField(max_length=100, required=False, allow_null=True, allow_blank=True)


class LinkUpdateSerializer(LinkInputSerializer):
    platform = serializers.ChoiceField(
        choices=StoreLink.PLATFORM_CHOICES,
        error_messages={
            'required': 'Each link must have a platform.',
            'invalid_choice': 'Invalid platform. Allowed: website, instagram, facebook, tiktok, whatsapp.',
        },
    )
    url = serializers.URLField(
        max_length=500,
        error_messages={
            'required': 'Each link must have a URL.',
            'invalid': 'Each link must have a valid URL format.',
            'max_length': 'Link URL cannot exceed 500 characters.',
        },
    )
    handle = serializers.CharField(
        max_length=100,
        required=False,
        allow_null=True,
        allow_blank=True,
        error_messages={'max_length': 'Handle cannot exceed 100 characters.'},
    )


class ContactInputSerializer(serializers.Serializer):
    whatsapp = serializers.CharField(max_length=20, required=False, allow_null=True, allow_blank=True)
    phone = serializers.CharField(max_length=20, required=False, allow_null=True, allow_blank=True)


class StoreCreateSerializer(serializers.Serializer):
    """New store submitted by a user, with its categories, links and contacts"""
    name = serializers.CharField(max_length=255)
    description = serializers.CharField(max_length=2000, required=False, allow_null=True, allow_blank=True)
    city = serializers.CharField(max_length=100, required=False, allow_null=True, allow_blank=True)
    logo = serializers.ImageField(required=False, allow_null=True)
    category_ids = serializers.ListField(
        child=serializers.PrimaryKeyRelatedField(queryset=Category.objects.all()),
        allow_empty=False,
        error_messages={
            'required': 'At least one category is required.',
            'empty': 'At least one category is required.',
        },
    )
    links = LinkInputSerializer(many=True, required=False, allow_null=True)
    contacts = ContactInputSerializer(required=False, allow_null=True)

    def validate_logo(self, value):
        if value is None:
            return value
        return validate_upload(
            value,
            ALLOWED_LOGO_TYPES,
            settings.MAX_LOGO_SIZE,
            'The logo must be a file of type: jpeg, png, jpg, webp.',
            'The logo must not be greater than 2048 kilobytes.',
        )

    def create(self, validated_data):
        logo = validated_data.pop('logo', None)
        categories = validated_data.pop('category_ids')
        links = validated_data.pop('links', None) or []
        contacts = validated_data.pop('contacts', None)

        with transaction.atomic():
            store = Store.objects.create(
                name=validated_data['name'],
                description=validated_data.get('description') or None,
                city=validated_data.get('city') or None,
                logo_data=file_to_data_url(logo) if logo else None,
                status='active',
                submitted_by=self.context['request'].user,
            )
            store.categories.set(categories)
            for link in links:
                StoreLink.objects.create(
                    store=store,
                    platform=link['platform'],
                    url=link['url'],
                    handle=link.get('handle') or None,
                )
            if contacts:
                StoreContact.objects.create(
                    store=store,
                    whatsapp=contacts.get('whatsapp') or None,
                    phone=contacts.get('phone') or None,
                )
        return store


class StoreUpdateSerializer(serializers.Serializer):
    """Owner edits of the store profile"""
    name = serializers.CharField(
        max_length=255,
        required=False,
        error_messages={
            'blank': 'The store name is required.',
            'max_length': 'The store name cannot exceed 255 characters.',
        },
    )
    description = serializers.CharField(
        max_length=2000,
        required=False,
        allow_null=True,
        allow_blank=True,
        error_messages={'max_length': 'The description cannot exceed 2000 characters.'},
    )
    city = serializers.CharField(
        max_length=100,
        required=False,
        allow_null=True,
        allow_blank=True,
        error_messages={'max_length': 'The city name cannot exceed 100 characters.'},
    )
    contacts = ContactInputSerializer(required=False, allow_null=True)

    def update(self, instance, validated_data):
        contacts = validated_data.pop('contacts', None)

        with transaction.atomic():
            for attr, value in validated_data.items():
                setattr(instance, attr, value)
            instance.save()

            if contacts is not None:
                StoreContact.objects.update_or_create(
                    store=instance,
                    defaults={
                        'whatsapp': contacts.get('whatsapp') or None,
                        'phone': contacts.get('phone') or None,
                    },
                )
        return instance


class StoreLinksUpdateSerializer(serializers.Serializer):
    links = LinkUpdateSerializer(
        many=True,
        allow_empty=False,
        error_messages={
            'required': 'Links array is required.',
            'empty': 'Links array is required.',
            'not_a_list': 'Links must be an array.',
        },
    )


class LogoUploadSerializer(serializers.Serializer):
    logo = serializers.ImageField()

    def validate_logo(self, value):
        return validate_upload(
            value,
            ALLOWED_LOGO_TYPES,
            settings.MAX_LOGO_SIZE,
            'The logo must be a file of type: jpeg, png, jpg, webp.',
            'The logo must not be greater than 2048 kilobytes.',
        )


# ============================================================================
# Review Serializers
# ============================================================================

class ReviewProofSerializer(serializers.ModelSerializer):
    url = serializers.CharField(read_only=True)

    class Meta:
        model = ReviewProof
        fields = ['id', 'url', 'status', 'created_at']


class StoreReplySerializer(serializers.ModelSerializer):
    user = serializers.SerializerMethodField()

    class Meta:
        model = StoreReply
        fields = ['id', 'reply_text', 'user', 'created_at']

    def get_user(self, obj):
        return {'id': obj.user_id, 'name': obj.user.name}


class ReviewSerializer(serializers.ModelSerializer):
    """
    Review with its author, latest proof and visible reply.
    The store block is only added when `with_store` is set in the context.
    """
    user = serializers.SerializerMethodField()
    reply = serializers.SerializerMethodField()
    proof = serializers.SerializerMethodField()
    store = serializers.SerializerMethodField()

    class Meta:
        model = Review
        fields = ['id', 'stars', 'comment', 'status', 'is_high_risk', 'user', 'reply', 'proof', 'store', 'created_at']

    def get_user(self, obj):
        return {
            'id': obj.user_id,
            'name': obj.user.name,
            'avatar': avatar_url(obj.user),
        }

    def get_reply(self, obj):
        reply = obj.visible_reply
        if reply is None:
            return None
        return StoreReplySerializer(reply).data

    def get_proof(self, obj):
        proof = obj.latest_proof
        if proof is None:
            return None
        return ReviewProofSerializer(proof).data

    def get_store(self, obj):
        return {
            'id': obj.store_id,
            'name': obj.store.name,
            'slug': obj.store.slug,
        }

    def to_representation(self, instance):
        data = super().to_representation(instance)
        if data['reply'] is None:
            data.pop('reply')
        if not self.context.get('with_store'):
            data.pop('store')
        return data


class ReviewInputSerializer(serializers.Serializer):
    stars = serializers.IntegerField(min_value=MIN_RATING, max_value=MAX_RATING)
    comment = serializers.CharField(min_length=MIN_REVIEW_LENGTH, max_length=MAX_REVIEW_LENGTH)

    def validate_comment(self, value):
        return moderated_text(value)


class ProofUploadSerializer(serializers.Serializer):
    proof = serializers.ImageField(
        error_messages={
            'required': 'A proof image is required.',
            'invalid_image': 'The proof must be an image.',
            'invalid': 'The proof must be an image.',
        },
    )

    def validate_proof(self, value):
        return validate_upload(
            value,
            ALLOWED_PROOF_TYPES,
            settings.MAX_PROOF_SIZE,
            'The proof must be a JPG, PNG, or WebP image.',
            'The proof image must not exceed 5MB.',
        )


class ReplyInputSerializer(serializers.Serializer):
    reply_text = serializers.CharField(max_length=MAX_REPLY_LENGTH)

    def validate_reply_text(self, value):
        return moderated_text(value)


# ============================================================================
# Claim & Report Serializers
# ============================================================================

class ClaimSerializer(serializers.ModelSerializer):
    store_id = serializers.IntegerField(read_only=True)
    store_name = serializers.CharField(source='store.name', read_only=True)
    store_slug = serializers.CharField(source='store.slug', read_only=True)

    class Meta:
        model = StoreClaimRequest
        fields = [
            'id',
            'store_id',
            'store_name',
            'store_slug',
            'requester_name',
            'requester_phone',
            'note',
            'status',
            'reject_reason',
            'created_at',
        ]


class ClaimInputSerializer(serializers.Serializer):
    requester_name = serializers.CharField(max_length=255)
    requester_phone = serializers.CharField(max_length=20)
    note = serializers.CharField(max_length=1000, required=False, allow_null=True, allow_blank=True)


class ReportSerializer(serializers.ModelSerializer):
    reportable_type = serializers.CharField(read_only=True)
    reportable_id = serializers.IntegerField(source='object_id', read_only=True)
    reportable_name = serializers.SerializerMethodField()

    class Meta:
        model = Report
        fields = ['id', 'reportable_type', 'reportable_id', 'reportable_name', 'reason', 'note', 'status', 'created_at']

    def get_reportable_name(self, obj):
        target = obj.reportable
        if target is None:
            return None
        kind = obj.reportable_type
        if kind == 'store':
            return target.name
        if kind == 'review':
            return f"Review by {target.user.name}" if target.user.name else 'Review'
        if kind == 'reply':
            return 'Store Reply'
        return None


class ReportInputSerializer(serializers.Serializer):
    """Resolves the reported object into validated_data['reportable']"""
    reportable_type = serializers.ChoiceField(choices=list(REPORTABLE_MODELS.keys()))
    reportable_id = serializers.IntegerField()
    reason = serializers.ChoiceField(choices=Report.REASON_CHOICES)
    note = serializers.CharField(max_length=1000, required=False, allow_null=True, allow_blank=True)

    def validate(self, attrs):
        kind = attrs['reportable_type']
        model = REPORTABLE_MODELS[kind]
        target = model.objects.filter(pk=attrs['reportable_id']).first()
        if target is None:
            raise serializers.ValidationError({'reportable_id': [f"The {kind} does not exist."]})
        attrs['reportable'] = target
        return attrs


# ============================================================================
# Notification & Profile Serializers
# ============================================================================

class NotificationSerializer(serializers.ModelSerializer):

    class Meta:
        model = Notification
        fields = ['id', 'type', 'title', 'message', 'is_read', 'created_at', 'related_id', 'user_name']


class UserProfileSerializer(serializers.ModelSerializer):
    """
    Public profile. Expects `submitted_stores_count` and `approved_reviews_count`
    annotations and the preview lists in the context.
    """
    avatar = serializers.SerializerMethodField()
    member_since = serializers.DateTimeField(source='date_joined', read_only=True)
    stats = serializers.SerializerMethodField()
    submitted_stores = serializers.SerializerMethodField()
    reviews = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ['id', 'name', 'avatar', 'member_since', 'stats', 'submitted_stores', 'reviews']

    def get_avatar(self, obj):
        return avatar_url(obj)

    def get_stats(self, obj):
        return {
            'stores_count': getattr(obj, 'submitted_stores_count', 0),
            'reviews_count': getattr(obj, 'approved_reviews_count', 0),
        }

    def get_submitted_stores(self, obj):
        stores = self.context.get('submitted_stores', [])
        return StoreListSerializer(stores, many=True, context=self.context).data

    def get_reviews(self, obj):
        reviews = self.context.get('reviews', [])
        return ReviewSerializer(reviews, many=True, context={**self.context, 'with_store': True}).data
