"""Simple in-application internationalisation helpers.

Every page is rendered for one of the supported languages, taken from the
first segment of the URL.  Shared interface strings live here so templates,
emails and JSON responses resolve them the same way; catalog content itself is
stored per locale in the database.
"""

from __future__ import annotations

from typing import Dict, Iterable

AVAILABLE_LANGUAGES: Dict[str, str] = {
    "en": "English",
    "ar": "العربية",
}

DEFAULT_LANGUAGE = "en"

RTL_LANGUAGES = frozenset({"ar"})

# Shared strings used by the public layout (navigation, footer, general UI).
BASE_TRANSLATIONS: Dict[str, Dict[str, str]] = {
    "en": {
        "meta.site_name": "Athenas",
        "meta.tagline": "Premium Egyptian frozen vegetables, fruits and fries",
        "nav.home": "Home",
        "nav.products": "Products",
        "nav.about": "About Us",
        "nav.contact": "Contact",
        "nav.wishlist": "Wishlist",
        "nav.language": "Language",
        "nav.language.ar": "عربي",
        "nav.language.en": "English",
        "home.hero.title": "Frozen quality, delivered worldwide",
        "home.hero.subtitle": "IQF frozen produce from Egypt's finest farms to your market.",
        "home.featured.title": "Featured Products",
        "home.new.title": "New Arrivals",
        "home.categories.title": "Our Categories",
        "home.categories.count": "{count} products",
        "about.title": "About Athenas",
        "about.story": "We select, freeze and export Egyptian produce for food service and retail partners around the world.",
        "contact.title": "Contact Us",
        "contact.subtitle": "Send us a message and our export team will reply within one business day.",
        "products.title": "Our Products",
        "products.filters.category": "Category",
        "products.filters.all_categories": "All categories",
        "products.filters.search": "Search",
        "products.filters.placeholder": "Find a product by name",
        "products.filters.sort": "Sort by",
        "products.sort.default": "Recommended",
        "products.sort.name-asc": "Name (A-Z)",
        "products.sort.name-desc": "Name (Z-A)",
        "products.sort.newest": "Newest",
        "products.meta.summary": "Showing {total} products",
        "products.empty.title": "No products match your filters",
        "products.badge.new": "New",
        "products.badge.featured": "Featured",
        "product.weight": "Weight",
        "product.min_order": "Minimum order",
        "product.grade": "Grade",
        "product.related": "Related Products",
        "product.not_found": "This product could not be found.",
        "wishlist.title": "My Wishlist",
        "wishlist.empty": "Your wishlist is empty.",
        "wishlist.add": "Add to wishlist",
        "wishlist.remove": "Remove",
        "wishlist.request_quote": "Request a Quote",
        "form.full_name": "Full name",
        "form.name": "Name",
        "form.email": "Email",
        "form.phone": "Phone",
        "form.company": "Company",
        "form.subject": "Subject",
        "form.message": "Message",
        "form.submit": "Send",
        "form.success": "Thank you! We will be in touch shortly.",
        "form.error": "Something went wrong. Please try again.",
        "footer.rights": "Copyright © {year}, Athenas. All rights reserved.",
        "email.quote.subject": "Your Quote Request - Athenas",
        "email.quote.greeting": "Dear {name},",
        "email.quote.thanks": "Thank you for submitting your quote request. We have received your inquiry and our team will contact you shortly.",
        "email.quote.summary": "Your Request Summary",
        "email.quote.product": "Product Name",
        "email.quote.category": "Category",
        "email.quote.total": "Total Items:",
        "email.quote.questions": "If you have any questions, feel free to reply to this email.",
        "email.quote.signature": "Athenas - Your Trusted Partner",
        "auth.login.title": "Administrator Login",
        "auth.login.subtitle": "Access the Athenas dashboard",
        "auth.login.username": "Username",
        "auth.login.password": "Password",
        "auth.login.submit": "Sign in",
        "auth.login.error": "Incorrect username or password.",
        "auth.logout.success": "You have been signed out.",
        "admin.nav.dashboard": "Dashboard",
        "admin.nav.categories": "Categories",
        "admin.nav.products": "Products",
        "admin.nav.logout": "Sign out",
        "admin.nav.greeting": "Hello, {name}",
    },
    "ar": {
        "meta.site_name": "أثيناس",
        "meta.tagline": "خضروات وفواكه وبطاطس مصرية مجمدة فاخرة",
        "nav.home": "الرئيسية",
        "nav.products": "المنتجات",
        "nav.about": "من نحن",
        "nav.contact": "تواصل معنا",
        "nav.wishlist": "المفضلة",
        "nav.language": "اللغة",
        "nav.language.ar": "عربي",
        "nav.language.en": "English",
        "home.hero.title": "جودة مجمدة تصل إلى كل العالم",
        "home.hero.subtitle": "منتجات مجمدة بتقنية IQF من أفضل مزارع مصر إلى سوقك.",
        "home.featured.title": "منتجات مميزة",
        "home.new.title": "وصل حديثاً",
        "home.categories.title": "أقسامنا",
        "home.categories.count": "{count} منتج",
        "about.title": "عن أثيناس",
        "about.story": "نختار المنتجات المصرية ونجمدها ونصدرها لشركائنا في قطاعي الضيافة والتجزئة حول العالم.",
        "contact.title": "تواصل معنا",
        "contact.subtitle": "أرسل لنا رسالتك وسيرد عليك فريق التصدير خلال يوم عمل واحد.",
        "products.title": "منتجاتنا",
        "products.filters.category": "الفئة",
        "products.filters.all_categories": "جميع الفئات",
        "products.filters.search": "بحث",
        "products.filters.placeholder": "ابحث عن منتج بالاسم",
        "products.filters.sort": "ترتيب حسب",
        "products.sort.default": "الموصى به",
        "products.sort.name-asc": "الاسم (أ-ي)",
        "products.sort.name-desc": "الاسم (ي-أ)",
        "products.sort.newest": "الأحدث",
        "products.meta.summary": "عرض {total} منتج",
        "products.empty.title": "لا توجد منتجات مطابقة",
        "products.badge.new": "جديد",
        "products.badge.featured": "مميز",
        "product.weight": "الوزن",
        "product.min_order": "الحد الأدنى للطلب",
        "product.grade": "الدرجة",
        "product.related": "منتجات ذات صلة",
        "product.not_found": "لم يتم العثور على هذا المنتج.",
        "wishlist.title": "قائمة المفضلة",
        "wishlist.empty": "قائمة المفضلة فارغة.",
        "wishlist.add": "أضف إلى المفضلة",
        "wishlist.remove": "إزالة",
        "wishlist.request_quote": "طلب عرض سعر",
        "form.full_name": "الاسم الكامل",
        "form.name": "الاسم",
        "form.email": "البريد الإلكتروني",
        "form.phone": "الهاتف",
        "form.company": "الشركة",
        "form.subject": "الموضوع",
        "form.message": "الرسالة",
        "form.submit": "إرسال",
        "form.success": "شكراً لك! سنتواصل معك قريباً.",
        "form.error": "حدث خطأ ما. يرجى المحاولة مرة أخرى.",
        "footer.rights": "جميع الحقوق محفوظة © {year}، أثيناس.",
        "email.quote.subject": "طلب عرض السعر الخاص بك - أثيناس",
        "email.quote.greeting": "مرحباً {name}،",
        "email.quote.thanks": "شكراً لتقديم طلب عرض السعر. لقد استلمنا طلبك وسيتواصل معك فريقنا قريباً.",
        "email.quote.summary": "ملخص طلبك",
        "email.quote.product": "اسم المنتج",
        "email.quote.category": "الفئة",
        "email.quote.total": "إجمالي المنتجات:",
        "email.quote.questions": "إذا كان لديك أي أسئلة، لا تتردد في الرد على هذا البريد الإلكتروني.",
        "email.quote.signature": "أثيناس - شريكك الموثوق",
        "auth.login.title": "تسجيل دخول المشرف",
        "auth.login.subtitle": "الدخول إلى لوحة تحكم أثيناس",
        "auth.login.username": "اسم المستخدم",
        "auth.login.password": "كلمة المرور",
        "auth.login.submit": "تسجيل الدخول",
        "auth.login.error": "بيانات الدخول غير صحيحة.",
        "auth.logout.success": "تم تسجيل الخروج بنجاح.",
        "admin.nav.dashboard": "لوحة التحكم",
        "admin.nav.categories": "الأقسام",
        "admin.nav.products": "المنتجات",
        "admin.nav.logout": "تسجيل الخروج",
        "admin.nav.greeting": "مرحباً، {name}",
    },
}


def normalise_lang(candidate) -> str:
    """Return a supported language code for *candidate*, defaulting to English."""
    if not candidate:
        return DEFAULT_LANGUAGE
    normalised = str(candidate).strip().lower()
    if normalised in AVAILABLE_LANGUAGES:
        return normalised
    return DEFAULT_LANGUAGE


def text_direction(lang: str) -> str:
    return "rtl" if lang in RTL_LANGUAGES else "ltr"


def get_translation(key: str, lang: str, default: str | None = None) -> str:
    """Return the translation for *key* in *lang* or fall back to English."""
    if lang not in AVAILABLE_LANGUAGES:
        lang = DEFAULT_LANGUAGE
    lang_bucket = BASE_TRANSLATIONS.get(lang, {})
    if key in lang_bucket:
        return lang_bucket[key]
    fallback = BASE_TRANSLATIONS.get(DEFAULT_LANGUAGE, {}).get(key)
    if fallback is not None:
        return fallback
    return default if default is not None else key


def serialise_translations(keys: Iterable[str] | None = None) -> Dict[str, Dict[str, str]]:
    """Return a filtered copy of the base translations suitable for JSON."""
    if keys is None:
        return BASE_TRANSLATIONS
    filtered: Dict[str, Dict[str, str]] = {}
    keys = set(keys)
    for lang, mapping in BASE_TRANSLATIONS.items():
        filtered[lang] = {k: v for k, v in mapping.items() if k in keys}
    return filtered
