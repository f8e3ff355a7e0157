"""
Management command to load the default store categories
"""
from django.core.management.base import BaseCommand

from apps.stores.models import Category

DEFAULT_CATEGORIES = [
    {
        'name_en': 'Electronics',
        'name_ar': 'الكترونيات',
        'name_fr': 'Electronique',
        'slug': 'electronics',
        'risk_level': 'normal',
        'icon_key': 'electronics',
    },
    {
        'name_en': 'Fashion',
        'name_ar': 'أزياء',
        'name_fr': 'Mode',
        'slug': 'fashion',
        'risk_level': 'normal',
        'icon_key': 'fashion',
    },
    {
        'name_en': 'Beauty & Cosmetics',
        'name_ar': 'الجمال ومستحضرات التجميل',
        'name_fr': 'Beaute et Cosmetiques',
        'slug': 'beauty-cosmetics',
        'risk_level': 'normal',
        'icon_key': 'beauty',
    },
    {
        'name_en': 'Kids & Toys',
        'name_ar': 'أطفال وألعاب',
        'name_fr': 'Enfants et Jouets',
        'slug': 'kids-toys',
        'risk_level': 'normal',
        'icon_key': 'kids',
    },
    {
        'name_en': 'Supplements & Wellness',
        'name_ar': 'مكملات وصحة',
        'name_fr': 'Supplements et Bien-etre',
        'slug': 'supplements-wellness',
        'risk_level': 'normal',
        'icon_key': 'supplements',
    },
    {
        'name_en': 'Travel Agency',
        'name_ar': 'وكالة سفر',
        'name_fr': 'Agence de Voyage',
        'slug': 'travel-agency',
        'risk_level': 'normal',
        'icon_key': 'reisen',
    },
    # High-risk categories
    {
        'name_en': 'Digital Services',
        'name_ar': 'خدمات رقمية',
        'name_fr': 'Services Numeriques',
        'slug': 'digital-services',
        'risk_level': 'high_risk',
        'icon_key': 'digital',
    },
    {
        'name_en': 'Credits & Balances',
        'name_ar': 'أرصدة ومحافظ',
        'name_fr': 'Credits et Soldes',
        'slug': 'credits-balances',
        'risk_level': 'high_risk',
        'icon_key': 'credits',
    },
    # Only listed under "See all"
    {
        'name_en': 'Fast Food',
        'name_ar': 'وجبات سريعة',
        'name_fr': 'Restauration Rapide',
        'slug': 'fast-food',
        'risk_level': 'normal',
        'icon_key': 'fast_food',
        'show_on_home': False,
    },
]


class Command(BaseCommand):
    help = 'Create or update the default store categories'

    def handle(self, *args, **options):
        created_count = 0
        for data in DEFAULT_CATEGORIES:
            defaults = dict(data)
            slug = defaults.pop('slug')
            defaults.setdefault('show_on_home', True)
            _, created = Category.objects.update_or_create(slug=slug, defaults=defaults)
            if created:
                created_count += 1

        self.stdout.write(self.style.SUCCESS(
            f"Categories seeded: {created_count} created, {len(DEFAULT_CATEGORIES) - created_count} updated"
        ))
