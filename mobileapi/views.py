"""
Views for Mobile API
REST endpoints consumed by the Android and iOS apps
"""
import logging

from django.contrib.auth import authenticate, get_user_model
from django.contrib.contenttypes.models import ContentType
from django.db import transaction
from django.db.models import Count, Q
from django.shortcuts import get_object_or_404
from django.utils import timezone
from rest_framework import generics, permissions, status
from rest_framework.authtoken.models import Token
from rest_framework.exceptions import ValidationError
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.common import privacy, rate_limit
from apps.common.models import Banner
from apps.moderation.models import Report
from apps.notifications.models import Notification
from apps.notifications.services import NotificationService
from apps.reviews.models import Review, ReviewProof, StoreReply
from apps.stores.duplicates import check_for_duplicates
from apps.stores.models import Category, Store, StoreClaimRequest, StoreLink
from apps.users import verification

from .constants import (
    ERROR_MESSAGES,
    HOME_STORES_LIMIT,
    MAX_HOME_STORES_LIMIT,
    PROFILE_PREVIEW_LIMIT,
    SUCCESS_MESSAGES,
    SUPPORTED_LOCALES,
)
from .exceptions import DailyLimitExceeded, DuplicateStoreError
from .filters import StoreFilter
from .pagination import ProfilePagination, StandardPagination
from .permissions import IsAdminRole, IsStoreOwner
from .serializers import (
    AvatarUploadSerializer,
    BannerSerializer,
    CategorySerializer,
    ClaimInputSerializer,
    ClaimSerializer,
    LoginSerializer,
    LogoUploadSerializer,
    NotificationSerializer,
    ProofUploadSerializer,
    RegisterSerializer,
    ReplyInputSerializer,
    ReportInputSerializer,
    ReportSerializer,
    ReviewInputSerializer,
    ReviewSerializer,
    RiskLevelSerializer,
    StoreCreateSerializer,
    StoreDetailSerializer,
    StoreLinkSerializer,
    StoreLinksUpdateSerializer,
    StoreListSerializer,
    StoreOwnerSerializer,
    StoreReplySerializer,
    StoreSummarySerializer,
    StoreUpdateSerializer,
    UpdateProfileSerializer,
    UserProfileSerializer,
    UserSerializer,
    VerifyCodeSerializer,
)
from .throttles import (
    EmailResendRateThrottle,
    EmailVerifyCodeRateThrottle,
    LoginRateThrottle,
    RegisterRateThrottle,
)
from .utils import normalize_store_payload, resize_avatar

logger = logging.getLogger(__name__)


User = get_user_model()


def check_daily_limit(action, user, limit_name, message_key):
    """Raise a 429 once the user has used up today's submissions"""
    key = rate_limit.user_key(action, user)
    limit = rate_limit.get_limit(limit_name)
    if rate_limit.too_many_attempts(key, limit):
        raise DailyLimitExceeded(ERROR_MESSAGES[message_key].format(limit=limit))
    return key


def parse_limit(request, default=HOME_STORES_LIMIT, maximum=MAX_HOME_STORES_LIMIT):
    try:
        limit = int(request.query_params.get('limit', default))
    except (TypeError, ValueError):
        limit = default
    return max(1, min(limit, maximum))


# ============================================================================
# Authentication Views
# ============================================================================

class RegisterView(APIView):
    """Create an account and send the verification email when an address is given"""
    permission_classes = [permissions.AllowAny]
    throttle_classes = [RegisterRateThrottle]

    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()

        if user.email:
            sent, message = verification.send_verification_email(user, request=request)
            if not sent:
                logger.warning(f"Verification email not sent on registration for user {user.pk}: {message}")

        token, _ = Token.objects.get_or_create(user=user)
        logger.info(f"User registered: {user.pk}")

        return Response({
            'message': SUCCESS_MESSAGES['registered_verify'] if user.email else SUCCESS_MESSAGES['registered'],
            'user': UserSerializer(user, context={'request': request}).data,
            'token': token.key,
        }, status=status.HTTP_201_CREATED)


class LoginView(APIView):
    """Email or phone login"""
    permission_classes = [permissions.AllowAny]
    throttle_classes = [LoginRateThrottle]

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        login = serializer.validated_data.get('email') or serializer.validated_data.get('phone')

        user = authenticate(request, username=login, password=serializer.validated_data['password'])
        if user is None:
            return Response(
                {'message': ERROR_MESSAGES['invalid_credentials']},
                status=status.HTTP_401_UNAUTHORIZED
            )

        token, _ = Token.objects.get_or_create(user=user)

        return Response({
            'message': SUCCESS_MESSAGES['login_success'],
            'user': UserSerializer(user, context={'request': request}).data,
            'token': token.key,
            'email_verified': user.has_verified_email(),
        })


class LogoutView(APIView):

    def post(self, request):
        if isinstance(request.auth, Token):
            request.auth.delete()
        else:
            Token.objects.filter(user=request.user).delete()
        return Response({'message': SUCCESS_MESSAGES['logout_success']})


class MeView(APIView):

    def get(self, request):
        return Response({'user': UserSerializer(request.user, context={'request': request}).data})


class UpdateProfileView(APIView):

    def put(self, request):
        serializer = UpdateProfileSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        return Response({
            'message': SUCCESS_MESSAGES['profile_updated'],
            'user': UserSerializer(user, context={'request': request}).data,
        })

    def patch(self, request):
        return self.put(request)


class AvatarUploadView(APIView):
    """Avatars are resized and kept inline as a JPEG data URL"""
    parser_classes = [MultiPartParser, FormParser]

    def post(self, request):
        serializer = AvatarUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = request.user
        try:
            user.avatar = resize_avatar(serializer.validated_data['avatar'])
        except OSError as e:
            logger.error(f"Avatar upload failed for user {user.pk}: {str(e)}")
            return Response(
                {'message': ERROR_MESSAGES['avatar_failed']},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )
        user.save(update_fields=['avatar'])

        return Response({
            'message': SUCCESS_MESSAGES['avatar_uploaded'],
            'user': UserSerializer(user, context={'request': request}).data,
        })


class ResendVerificationEmailView(APIView):
    throttle_classes = [EmailResendRateThrottle]

    def post(self, request):
        user = request.user
        if not user.email:
            return Response({'message': ERROR_MESSAGES['no_email']}, status=status.HTTP_400_BAD_REQUEST)
        if user.has_verified_email():
            return Response({'message': ERROR_MESSAGES['email_already_verified']}, status=status.HTTP_400_BAD_REQUEST)

        sent, message = verification.send_verification_email(user, request=request)
        if not sent:
            return Response({'message': message}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        return Response({'message': SUCCESS_MESSAGES['verification_resent']})


class VerifyEmailCodeView(APIView):
    throttle_classes = [EmailVerifyCodeRateThrottle]

    def post(self, request):
        serializer = VerifyCodeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = request.user
        if user.has_verified_email():
            return Response({'message': ERROR_MESSAGES['email_already_verified']}, status=status.HTTP_400_BAD_REQUEST)

        success, message = verification.verify_code(user, serializer.validated_data['code'])
        if not success:
            raise ValidationError({'code': [message]})

        return Response({
            'message': SUCCESS_MESSAGES['email_verified'],
            'user': UserSerializer(user, context={'request': request}).data,
        })


class VerifyEmailLinkView(APIView):
    """Target of the signed link in the verification email"""
    permission_classes = [permissions.AllowAny]

    def get(self, request, id, hash):
        user = get_object_or_404(User, pk=id)

        if not verification.check_verification_link(user, hash, request.query_params.get('signature')):
            return Response({'message': ERROR_MESSAGES['invalid_verification_link']}, status=status.HTTP_403_FORBIDDEN)

        if not user.mark_email_as_verified():
            return Response({'message': ERROR_MESSAGES['email_already_verified']}, status=status.HTTP_400_BAD_REQUEST)

        logger.info(f"Email verified with link for user {user.pk}")
        return Response({'message': SUCCESS_MESSAGES['email_verified']})


# ============================================================================
# Banners & Categories
# ============================================================================

class BannerListView(APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        locale = request.query_params.get('locale', 'en')
        if locale not in SUPPORTED_LOCALES:
            locale = 'en'

        banners = Banner.objects.active().ordered()
        serializer = BannerSerializer(banners, many=True, context={'request': request, 'locale': locale})
        return Response({'data': serializer.data})


class CategoryListView(APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        categories = Category.objects.annotate(stores_count=Count('stores')).order_by('name_en')
        return Response({'data': CategorySerializer(categories, many=True).data})


class CategoryDetailView(APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request, slug):
        category = get_object_or_404(Category.objects.annotate(stores_count=Count('stores')), slug=slug)
        return Response({'data': CategorySerializer(category).data})


class CategoryRiskLevelView(APIView):
    """Admin only: switch a category between normal and high risk"""
    permission_classes = [permissions.IsAuthenticated, IsAdminRole]

    def put(self, request, id):
        category = get_object_or_404(Category, pk=id)
        serializer = RiskLevelSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        category.risk_level = serializer.validated_data['risk_level']
        category.save(update_fields=['risk_level', 'updated_at'])
        logger.info(f"Category {category.pk} risk level set to {category.risk_level} by user {request.user.pk}")

        category = Category.objects.annotate(stores_count=Count('stores')).get(pk=category.pk)
        return Response({
            'message': SUCCESS_MESSAGES['risk_level_updated'],
            'data': CategorySerializer(category).data,
        })


# ============================================================================
# Stores
# ============================================================================

class StoreSearchView(generics.ListAPIView):
    """
    Search active stores

    Query params: q, category (slug), city, verified, per_page
    """
    permission_classes = [permissions.AllowAny]
    serializer_class = StoreListSerializer
    pagination_class = StandardPagination
    filterset_class = StoreFilter

    def get_queryset(self):
        return Store.objects.active().prefetch_related('categories').order_by(
            '-avg_rating_cache', '-reviews_count_cache', '-id'
        )

    def filter_queryset(self, queryset):
        return super().filter_queryset(queryset).distinct()


class TopRatedStoresView(APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        stores = (
            Store.objects.active()
            .filter(reviews_count_cache__gt=0)
            .prefetch_related('categories')
            .order_by('-avg_rating_cache', '-reviews_count_cache', '-id')[:parse_limit(request)]
        )
        return Response({'data': StoreListSerializer(stores, many=True).data})


class TrendingStoresView(APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        stores = (
            Store.objects.active()
            .prefetch_related('categories')
            .order_by('-reviews_count_cache', '-avg_rating_cache', '-id')[:parse_limit(request)]
        )
        return Response({'data': StoreListSerializer(stores, many=True).data})


class StoreDetailView(APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request, slug):
        store = get_object_or_404(
            Store.objects.active().select_related('contacts').prefetch_related('categories', 'links'),
            slug=slug,
        )
        return Response({'data': StoreDetailSerializer(store, context={'request': request}).data})


class StoreSummaryView(APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request, slug):
        store = get_object_or_404(Store.objects.active(), slug=slug)
        return Response({'data': StoreSummarySerializer(store).data})


class StoreCreateView(APIView):
    """
    Submit a new store

    Accepts JSON or multipart; in multipart requests `links` and `contacts`
    may be JSON strings. Similar stores are rejected with a 409.
    """

    def post(self, request):
        limit_key = check_daily_limit('stores', request.user, 'stores_per_day', 'store_limit')

        serializer = StoreCreateSerializer(
            data=normalize_store_payload(request.data),
            context={'request': request},
        )
        serializer.is_valid(raise_exception=True)

        duplicate = check_for_duplicates(
            serializer.validated_data['name'],
            serializer.validated_data.get('links') or [],
        )
        if duplicate['has_duplicate']:
            raise DuplicateStoreError(duplicate)

        store = serializer.save()
        rate_limit.hit(limit_key)
        logger.info(f"Store {store.pk} submitted by user {request.user.pk}")

        store = Store.objects.select_related('contacts').prefetch_related('categories', 'links').get(pk=store.pk)
        return Response({
            'message': SUCCESS_MESSAGES['store_created'],
            'data': StoreDetailSerializer(store, context={'request': request}).data,
        }, status=status.HTTP_201_CREATED)


# ============================================================================
# Reviews
# ============================================================================

class StoreReviewsView(generics.ListAPIView):
    """
    GET: approved reviews of a store, newest first
    POST: review the store
    """
    serializer_class = ReviewSerializer
    pagination_class = StandardPagination

    def get_permissions(self):
        if self.request.method == 'POST':
            return [permissions.IsAuthenticated()]
        return [permissions.AllowAny()]

    def get_store(self):
        return get_object_or_404(Store, pk=self.kwargs['store_id'])

    def get_queryset(self):
        store = self.get_store()
        return (
            store.reviews.approved()
            .select_related('user')
            .order_by('-created_at', '-id')
        )

    def post(self, request, store_id):
        store = self.get_store()
        serializer = ReviewInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = request.user
        limit_key = check_daily_limit('reviews', user, 'reviews_per_day', 'review_limit')

        if Review.objects.filter(store=store, user=user).exists():
            return Response({'message': ERROR_MESSAGES['review_exists']}, status=status.HTTP_409_CONFLICT)

        # Auto-approve only when every category of the store is normal
        is_high_risk = store.is_high_risk()
        auto_approve = not is_high_risk
        hashes = privacy.request_hashes(request)

        with transaction.atomic():
            review = Review.objects.create(
                store=store,
                user=user,
                stars=serializer.validated_data['stars'],
                comment=serializer.validated_data['comment'],
                status='approved' if auto_approve else 'pending',
                is_high_risk=is_high_risk,
                auto_approved=auto_approve,
                ip_hash=hashes['ip_hash'],
                ua_hash=hashes['ua_hash'],
                approved_at=timezone.now() if auto_approve else None,
            )

        rate_limit.hit(limit_key)

        if auto_approve:
            store.recalculate_ratings()

        logger.info(f"Review {review.pk} submitted for store {store.pk} (high risk: {is_high_risk})")

        return Response({
            'message': SUCCESS_MESSAGES['review_submitted_proof'] if is_high_risk else SUCCESS_MESSAGES['review_submitted'],
            'requires_proof': is_high_risk,
            'data': ReviewSerializer(review, context={'request': request}).data,
        }, status=status.HTTP_201_CREATED)


class MyReviewsView(generics.ListAPIView):
    serializer_class = ReviewSerializer
    pagination_class = StandardPagination

    def get_queryset(self):
        return (
            Review.objects.filter(user=self.request.user)
            .select_related('user', 'store')
            .order_by('-created_at', '-id')
        )

    def get_serializer_context(self):
        context = super().get_serializer_context()
        context['with_store'] = True
        return context


class MyStoreReviewView(APIView):
    """Whether the current user already reviewed a store"""

    def get(self, request, store_id):
        store = get_object_or_404(Store, pk=store_id)
        review = Review.objects.filter(store=store, user=request.user).select_related('user').first()
        return Response({
            'has_reviewed': review is not None,
            'data': ReviewSerializer(review, context={'request': request}).data if review else None,
        })


class ReviewUpdateView(APIView):

    def put(self, request, id):
        review = get_object_or_404(Review.objects.select_related('store', 'user'), pk=id)
        serializer = ReviewInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        if review.user_id != request.user.pk:
            return Response({'message': ERROR_MESSAGES['review_update_forbidden']}, status=status.HTTP_403_FORBIDDEN)

        review.stars = serializer.validated_data['stars']
        review.comment = serializer.validated_data['comment']
        review.save(update_fields=['stars', 'comment', 'updated_at'])
        review.store.recalculate_ratings()

        return Response({
            'message': SUCCESS_MESSAGES['review_updated'],
            'data': ReviewSerializer(review, context={'request': request}).data,
        })


class ReviewProofUploadView(APIView):
    parser_classes = [MultiPartParser, FormParser]

    def post(self, request, id):
        review = get_object_or_404(Review, pk=id)
        serializer = ProofUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        if review.user_id != request.user.pk:
            return Response({'message': ERROR_MESSAGES['proof_forbidden']}, status=status.HTTP_403_FORBIDDEN)

        if review.proofs.filter(status='approved').exists():
            return Response({'message': ERROR_MESSAGES['proof_exists']}, status=status.HTTP_422_UNPROCESSABLE_ENTITY)

        proof = ReviewProof.objects.create(
            review=review,
            file_path=serializer.validated_data['proof'],
            status='pending',
        )
        logger.info(f"Proof {proof.pk} uploaded for review {review.pk}")

        return Response({
            'message': SUCCESS_MESSAGES['proof_uploaded_high_risk'] if review.is_high_risk else SUCCESS_MESSAGES['proof_uploaded'],
            'data': {
                'id': proof.id,
                'url': proof.url,
                'status': proof.status,
            },
        }, status=status.HTTP_201_CREATED)


class ReviewReplyView(APIView):
    """Store owners answer a review on their verified store"""

    def post(self, request, id):
        review = get_object_or_404(Review.objects.select_related('store', 'user'), pk=id)
        serializer = ReplyInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = request.user
        store = review.store

        if not store.is_verified:
            return Response({'message': ERROR_MESSAGES['reply_store_unverified']}, status=status.HTTP_403_FORBIDDEN)

        if not user.is_owner_of(store):
            return Response({'message': ERROR_MESSAGES['reply_not_owner']}, status=status.HTTP_403_FORBIDDEN)

        if StoreReply.objects.filter(review=review).exists():
            return Response({'message': ERROR_MESSAGES['reply_exists']}, status=status.HTTP_422_UNPROCESSABLE_ENTITY)

        reply = StoreReply.objects.create(
            review=review,
            store=store,
            user=user,
            reply_text=serializer.validated_data['reply_text'],
        )
        NotificationService.new_reply(review, user)

        return Response({
            'message': SUCCESS_MESSAGES['reply_submitted'],
            'data': StoreReplySerializer(reply).data,
        }, status=status.HTTP_201_CREATED)


# ============================================================================
# Claims & Reports
# ============================================================================

class StoreClaimView(APIView):

    def post(self, request, store_id):
        store = get_object_or_404(Store, pk=store_id)
        serializer = ClaimInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = request.user
        if user.is_owner_of(store):
            return Response({'message': ERROR_MESSAGES['already_owner']}, status=status.HTTP_422_UNPROCESSABLE_ENTITY)

        if StoreClaimRequest.objects.filter(store=store, user=user, status='pending').exists():
            return Response({'message': ERROR_MESSAGES['claim_pending']}, status=status.HTTP_422_UNPROCESSABLE_ENTITY)

        claim = StoreClaimRequest.objects.create(
            store=store,
            user=user,
            requester_name=serializer.validated_data['requester_name'],
            requester_phone=serializer.validated_data['requester_phone'],
            note=serializer.validated_data.get('note') or None,
            status='pending',
        )
        logger.info(f"Claim {claim.pk} submitted for store {store.pk} by user {user.pk}")

        return Response({
            'message': SUCCESS_MESSAGES['claim_submitted'],
            'data': ClaimSerializer(claim).data,
        }, status=status.HTTP_201_CREATED)


class ClaimListView(APIView):

    def get(self, request):
        claims = (
            StoreClaimRequest.objects.filter(user=request.user)
            .select_related('store')
            .order_by('-created_at', '-id')
        )
        return Response({'data': ClaimSerializer(claims, many=True).data})


class ReportView(APIView):
    """
    GET: the current user's reports
    POST: report a review, a reply or a store
    """

    def get(self, request):
        reports = (
            Report.objects.filter(reporter=request.user)
            .select_related('content_type')
            .prefetch_related('reportable')
            .order_by('-created_at', '-id')
        )
        return Response({'data': ReportSerializer(reports, many=True).data})

    def post(self, request):
        serializer = ReportInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = request.user
        limit_key = check_daily_limit('reports', user, 'reports_per_day', 'report_limit')

        target = serializer.validated_data['reportable']
        content_type = ContentType.objects.get_for_model(target)

        already_reported = Report.objects.filter(
            reporter=user,
            content_type=content_type,
            object_id=target.pk,
            status='open',
        ).exists()
        if already_reported:
            return Response({'message': ERROR_MESSAGES['report_exists']}, status=status.HTTP_422_UNPROCESSABLE_ENTITY)

        report = Report.objects.create(
            reporter=user,
            content_type=content_type,
            object_id=target.pk,
            reason=serializer.validated_data['reason'],
            note=serializer.validated_data.get('note') or None,
            status='open',
        )
        rate_limit.hit(limit_key)
        logger.info(f"Report {report.pk} opened on {report.reportable_type} {target.pk} by user {user.pk}")

        return Response({
            'message': SUCCESS_MESSAGES['report_submitted'],
            'data': ReportSerializer(report).data,
        }, status=status.HTTP_201_CREATED)


# ============================================================================
# Notifications
# ============================================================================

class NotificationListView(generics.ListAPIView):
    serializer_class = NotificationSerializer
    pagination_class = StandardPagination

    def get_queryset(self):
        return Notification.objects.filter(user=self.request.user).order_by('-created_at', '-id')


class UnreadCountView(APIView):

    def get(self, request):
        count = Notification.objects.filter(user=request.user).unread().count()
        return Response({'unread_count': count})


class NotificationReadView(APIView):

    def post(self, request, id):
        notification = Notification.objects.filter(user=request.user, pk=id).first()
        if notification is None:
            return Response({'message': ERROR_MESSAGES['notification_not_found']}, status=status.HTTP_404_NOT_FOUND)

        notification.mark_as_read()
        return Response({'message': SUCCESS_MESSAGES['notification_marked_read']})


class MarkAllReadView(APIView):

    def post(self, request):
        count = Notification.objects.filter(user=request.user).unread().update(
            is_read=True,
            read_at=timezone.now(),
        )
        return Response({
            'message': SUCCESS_MESSAGES['all_notifications_read'],
            'count': count,
        })


class NotificationDeleteView(APIView):

    def delete(self, request, id):
        notification = Notification.objects.filter(user=request.user, pk=id).first()
        if notification is None:
            return Response({'message': ERROR_MESSAGES['notification_not_found']}, status=status.HTTP_404_NOT_FOUND)

        notification.delete()
        return Response({'message': SUCCESS_MESSAGES['notification_deleted']})


# ============================================================================
# Public Profiles
# ============================================================================

class UserProfileView(APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request, id):
        queryset = User.objects.annotate(
            submitted_stores_count=Count(
                'submitted_stores',
                filter=Q(submitted_stores__status='active'),
                distinct=True,
            ),
            approved_reviews_count=Count(
                'reviews',
                filter=Q(reviews__status='approved'),
                distinct=True,
            ),
        )
        user = get_object_or_404(queryset, pk=id)

        stores = (
            Store.objects.active()
            .filter(submitted_by=user)
            .prefetch_related('categories')
            .order_by('-created_at', '-id')[:PROFILE_PREVIEW_LIMIT]
        )
        reviews = (
            Review.objects.approved()
            .filter(user=user)
            .select_related('user', 'store')
            .order_by('-created_at', '-id')[:PROFILE_PREVIEW_LIMIT]
        )

        serializer = UserProfileSerializer(user, context={
            'request': request,
            'submitted_stores': stores,
            'reviews': reviews,
        })
        return Response({'data': serializer.data})


class UserProfileStoresView(generics.ListAPIView):
    permission_classes = [permissions.AllowAny]
    serializer_class = StoreListSerializer
    pagination_class = ProfilePagination

    def get_queryset(self):
        user = get_object_or_404(User, pk=self.kwargs['id'])
        return (
            Store.objects.active()
            .filter(submitted_by=user)
            .prefetch_related('categories')
            .order_by('-created_at', '-id')
        )


class UserProfileReviewsView(generics.ListAPIView):
    permission_classes = [permissions.AllowAny]
    serializer_class = ReviewSerializer
    pagination_class = ProfilePagination

    def get_queryset(self):
        user = get_object_or_404(User, pk=self.kwargs['id'])
        return (
            Review.objects.approved()
            .filter(user=user)
            .select_related('user', 'store')
            .order_by('-created_at', '-id')
        )

    def get_serializer_context(self):
        context = super().get_serializer_context()
        context['with_store'] = True
        return context


# ============================================================================
# Store Owner Dashboard
# ============================================================================

class MyStoresView(APIView):
    """Stores the current user owns"""

    def get(self, request):
        stores = (
            request.user.owned_stores
            .select_related('contacts')
            .prefetch_related('categories', 'links')
            .order_by('-created_at', '-id')
        )
        return Response({'data': StoreOwnerSerializer(stores, many=True, context={'request': request}).data})


class OwnedStoreMixin:
    """Looks up the store from the url and checks IsStoreOwner against it"""
    permission_classes = [permissions.IsAuthenticated, IsStoreOwner]

    def get_store(self, request, id):
        store = get_object_or_404(
            Store.objects.select_related('contacts').prefetch_related('categories', 'links'),
            pk=id,
        )
        self.check_object_permissions(request, store)
        return store


class MyStoreUpdateView(OwnedStoreMixin, APIView):

    def put(self, request, id):
        store = self.get_store(request, id)
        serializer = StoreUpdateSerializer(store, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()

        store = self.get_store(request, id)
        return Response({
            'message': SUCCESS_MESSAGES['store_updated'],
            'data': StoreOwnerSerializer(store, context={'request': request}).data,
        })


class MyStoreLogoView(OwnedStoreMixin, APIView):
    parser_classes = [MultiPartParser, FormParser]

    def post(self, request, id):
        store = self.get_store(request, id)
        serializer = LogoUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        if store.logo:
            store.logo.delete(save=False)
        store.logo = serializer.validated_data['logo']
        # The uploaded file replaces any inline logo
        store.logo_data = None
        store.save(update_fields=['logo', 'logo_data', 'updated_at'])

        return Response({
            'message': SUCCESS_MESSAGES['logo_uploaded'],
            'data': {'logo': store.full_logo_url},
        })


class MyStoreLinksView(OwnedStoreMixin, APIView):

    def get(self, request, id):
        store = self.get_store(request, id)
        links = StoreLink.objects.filter(store=store).order_by('id')
        return Response({'data': StoreLinkSerializer(links, many=True).data})

    def put(self, request, id):
        store = self.get_store(request, id)
        serializer = StoreLinksUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        with transaction.atomic():
            StoreLink.objects.filter(store=store).delete()
            for link in serializer.validated_data['links']:
                StoreLink.objects.create(
                    store=store,
                    platform=link['platform'],
                    url=link['url'],
                    handle=link.get('handle') or None,
                )

        links = StoreLink.objects.filter(store=store).order_by('id')
        return Response({
            'message': SUCCESS_MESSAGES['links_updated'],
            'data': StoreLinkSerializer(links, many=True).data,
        })
