from django.contrib import admin

from .models import Category, Subcategory, Site


class SubcategoryInline(admin.TabularInline):
    model = Subcategory
    extra = 0


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "owner", "created_at")
    search_fields = ("name", "owner__username", "owner__email")
    inlines = (SubcategoryInline,)


@admin.register(Subcategory)
class SubcategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "category", "created_at")
    list_select_related = ("category",)
    search_fields = ("name", "category__name")


@admin.register(Site)
class SiteAdmin(admin.ModelAdmin):
    list_display = ("name", "url", "subcategory", "created_at")
    list_select_related = ("subcategory", "subcategory__category")
    search_fields = ("name", "url")
