from django.contrib import admin
from .models import Profile, Message, VendorReport, Follow


class ProfileAdmin(admin.ModelAdmin):
    list_display = ('id', 'user', 'role', 'mpesa_number', 'wallet_balance', 'verified', 'banned')
    list_filter = ('role', 'verified', 'banned')
    list_display_links = ('id', 'user', )
    list_per_page = 20
    search_fields = ('id', 'user__username', 'mpesa_number')
    readonly_fields = ('wallet_balance', 'verification_submitted_at', 'date', 'date_update')

admin.site.register(Profile, ProfileAdmin)


class MessageAdmin(admin.ModelAdmin):
    list_display = ('id', 'sender', 'receiver', 'is_read', 'created_at')
    list_filter = ('is_read', 'created_at')
    search_fields = ('sender__username', 'receiver__username', 'content')
    readonly_fields = ('created_at',)
    list_per_page = 20

admin.site.register(Message, MessageAdmin)


class VendorReportAdmin(admin.ModelAdmin):
    list_display = ('id', 'vendor', 'customer', 'report_type', 'status', 'created_at')
    list_filter = ('status', 'report_type', 'created_at')
    list_display_links = ('id', 'vendor')
    search_fields = ('vendor__username', 'customer__username', 'description')
    readonly_fields = ('created_at', 'updated_at')
    list_per_page = 20

    fieldsets = (
        ('Signalement', {
            'fields': ('customer', 'vendor', 'product', 'report_type', 'description')
        }),
        ('Traitement', {
            'fields': ('status', 'admin_notes')
        }),
        ('Dates', {
            'fields': ('created_at', 'updated_at')
        }),
    )

admin.site.register(VendorReport, VendorReportAdmin)


class FollowAdmin(admin.ModelAdmin):
    list_display = ('id', 'follower', 'vendor', 'created_at')
    search_fields = ('follower__username', 'vendor__username')
    readonly_fields = ('created_at',)
    list_per_page = 20

admin.site.register(Follow, FollowAdmin)
