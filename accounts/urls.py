from django.urls import path
from . import views, views_messages, views_vendors

app_name = 'accounts'

urlpatterns = [
    path('auth/signup/', views.signup, name='signup'),
    path('auth/login/', views.login, name='login'),
    path('auth/profile/', views.profile, name='profile'),

    path('admin-api/users/', views.admin_list_users, name='admin-users'),
    path('admin-api/users/<int:user_id>/', views.admin_delete_user, name='admin-delete-user'),
    path('admin-api/users/<int:user_id>/role/', views.admin_update_role, name='admin-user-role'),
    path('admin-api/users/<int:user_id>/verify/', views.admin_verify_user, name='admin-user-verify'),
    path('admin-api/users/<int:user_id>/ban/', views.admin_ban_user, name='admin-user-ban'),
    path('admin-api/users/<int:user_id>/reset-password/', views_vendors.admin_reset_password, name='admin-reset-password'),
    path('admin-api/users/<int:user_id>/verification-document/', views_vendors.admin_verification_document,
         name='admin-verification-document'),
    path('admin-api/vendors/pending/', views.admin_pending_vendors, name='admin-pending-vendors'),
    path('admin-api/reports/', views.admin_list_reports, name='admin-reports'),
    path('admin-api/reports/<int:report_id>/', views.admin_update_report, name='admin-update-report'),

    path('reports/', views.create_vendor_report, name='create-report'),
    path('vendor/reports/count/', views.vendor_report_count, name='vendor-report-count'),

    path('vendors/<int:vendor_id>/profile/', views_vendors.vendor_profile, name='vendor-profile'),
    path('vendors/<int:vendor_id>/followers/', views_vendors.vendor_followers, name='vendor-followers'),
    path('vendor/verification-document/', views_vendors.verification_document, name='verification-document'),
    path('follows/', views_vendors.follows_root, name='follows'),
    path('follows/<int:vendor_id>/', views_vendors.follow_detail, name='follow-detail'),

    path('messages/', views_messages.messages_root, name='messages'),
    path('messages/<int:user_id>/', views_messages.conversation, name='conversation'),
    path('messages/<int:user_id>/read/', views_messages.mark_conversation_read, name='conversation-read'),
]
