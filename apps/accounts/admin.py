from django.contrib import admin
from .models import Profile


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = [
        'user',
        'get_email',
        'get_ruc_display',
        'full_name',
        'activity_type',
        'created_at',
    ]

    list_display_links = ['user', 'get_email']

    list_filter = [
        'activity_type',
        'created_at',
    ]

    search_fields = [
        'user__username',
        'user__email',
        'full_name',
        'business_name',
        'ruc',
    ]

    fieldsets = [
        ('Datos básicos', {
            'fields': ('user', 'full_name', 'phone', 'address')
        }),
        ('Datos tributarios', {
            'fields': ('ruc', 'dv', 'business_name', 'activity_type'),
            'classes': ('wide',),
        }),
        ('Fechas', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    ]

    readonly_fields = ['created_at', 'updated_at']
    ordering = ['-created_at']

    @admin.display(description='Email')
    def get_email(self, obj):
        return obj.user.email

    @admin.display(description='RUC')
    def get_ruc_display(self, obj):
        return obj.get_ruc_display()
