"""
URL configuration for Mobile API
Mounted under /api/v1/
"""
from django.urls import path

from .views import (
    # Authentication
    RegisterView, LoginView, LogoutView, MeView, UpdateProfileView, AvatarUploadView,
    ResendVerificationEmailView, VerifyEmailCodeView, VerifyEmailLinkView,
    # Banners & Categories
    BannerListView, CategoryListView, CategoryDetailView, CategoryRiskLevelView,
    # Stores
    StoreSearchView, TopRatedStoresView, TrendingStoresView, StoreDetailView,
    StoreSummaryView, StoreCreateView,
    # Reviews
    StoreReviewsView, MyReviewsView, MyStoreReviewView, ReviewUpdateView,
    ReviewProofUploadView, ReviewReplyView,
    # Claims & Reports
    StoreClaimView, ClaimListView, ReportView,
    # Notifications
    NotificationListView, UnreadCountView, NotificationReadView, MarkAllReadView,
    NotificationDeleteView,
    # Public Profiles
    UserProfileView, UserProfileStoresView, UserProfileReviewsView,
    # Store Owner Dashboard
    MyStoresView, MyStoreUpdateView, MyStoreLogoView, MyStoreLinksView,
)

app_name = 'mobileapi'

urlpatterns = [
    # Authentication endpoints
    path('auth/register', RegisterView.as_view(), name='auth-register'),
    path('auth/login', LoginView.as_view(), name='auth-login'),
    path('auth/email/verify/<int:id>/<str:hash>', VerifyEmailLinkView.as_view(), name='auth-email-verify'),
    path('auth/logout', LogoutView.as_view(), name='auth-logout'),
    path('auth/me', MeView.as_view(), name='auth-me'),
    path('auth/profile', UpdateProfileView.as_view(), name='auth-profile'),
    path('auth/avatar', AvatarUploadView.as_view(), name='auth-avatar'),
    path('auth/email/resend', ResendVerificationEmailView.as_view(), name='auth-email-resend'),
    path('auth/email/verify-code', VerifyEmailCodeView.as_view(), name='auth-email-verify-code'),

    # Banners & categories
    path('banners', BannerListView.as_view(), name='banner-list'),
    path('categories', CategoryListView.as_view(), name='category-list'),
    path('categories/<slug:slug>', CategoryDetailView.as_view(), name='category-detail'),
    path('admin/categories/<int:id>/risk-level', CategoryRiskLevelView.as_view(), name='admin-category-risk-level'),

    # Stores (fixed paths before the slug routes)
    path('stores', StoreCreateView.as_view(), name='store-create'),
    path('stores/search', StoreSearchView.as_view(), name='store-search'),
    path('stores/top-rated', TopRatedStoresView.as_view(), name='store-top-rated'),
    path('stores/trending', TrendingStoresView.as_view(), name='store-trending'),
    path('stores/<int:store_id>/reviews', StoreReviewsView.as_view(), name='store-reviews'),
    path('stores/<int:store_id>/my-review', MyStoreReviewView.as_view(), name='store-my-review'),
    path('stores/<int:store_id>/claim', StoreClaimView.as_view(), name='store-claim'),
    path('stores/<slug:slug>', StoreDetailView.as_view(), name='store-detail'),
    path('stores/<slug:slug>/summary', StoreSummaryView.as_view(), name='store-summary'),

    # Reviews
    path('reviews/my', MyReviewsView.as_view(), name='review-my'),
    path('reviews/<int:id>', ReviewUpdateView.as_view(), name='review-update'),
    path('reviews/<int:id>/proof', ReviewProofUploadView.as_view(), name='review-proof'),
    path('reviews/<int:id>/reply', ReviewReplyView.as_view(), name='review-reply'),

    # Claims & reports
    path('claims', ClaimListView.as_view(), name='claim-list'),
    path('reports', ReportView.as_view(), name='reports'),

    # Notifications
    path('notifications', NotificationListView.as_view(), name='notification-list'),
    path('notifications/unread-count', UnreadCountView.as_view(), name='notification-unread-count'),
    path('notifications/mark-all-read', MarkAllReadView.as_view(), name='notification-mark-all-read'),
    path('notifications/<int:id>/read', NotificationReadView.as_view(), name='notification-read'),
    path('notifications/<int:id>', NotificationDeleteView.as_view(), name='notification-delete'),

    # Public profiles
    path('users/<int:id>/profile', UserProfileView.as_view(), name='user-profile'),
    path('users/<int:id>/profile/stores', UserProfileStoresView.as_view(), name='user-profile-stores'),
    path('users/<int:id>/profile/reviews', UserProfileReviewsView.as_view(), name='user-profile-reviews'),

    # Store owner dashboard
    path('my-stores', MyStoresView.as_view(), name='my-stores'),
    path('my-stores/<int:id>', MyStoreUpdateView.as_view(), name='my-store-update'),
    path('my-stores/<int:id>/logo', MyStoreLogoView.as_view(), name='my-store-logo'),
    path('my-stores/<int:id>/links', MyStoreLinksView.as_view(), name='my-store-links'),
]
