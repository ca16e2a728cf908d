from django import forms
from django.contrib.auth.models import User
from django.conf import settings
from django.core import validators

from .models import Profile, VendorReport, Message
from .utils import is_valid_mpesa_number


def _clean_mpesa_number(value):
    if value and not is_valid_mpesa_number(value):
        raise forms.ValidationError(
            'Numéro M-Pesa invalide. Formats acceptés : 07XXXXXXXX, 254XXXXXXXXX ou +254XXXXXXXXX')
    return value


class SignupForm(forms.Form):
    username = forms.CharField(
        max_length=150,
        validators=[
            validators.RegexValidator(
                r'^[\w.@+-]+$',
                "Le nom d'utilisateur ne peut contenir que des lettres, chiffres et @/./+/-/_",
                'invalid'),
        ],
    )
    email = forms.EmailField(max_length=254)
    password = forms.CharField(min_length=8)
    mpesa_number = forms.CharField(max_length=20)
    role = forms.CharField(required=False)
    location = forms.CharField(max_length=150, required=False)

    def clean_username(self):
        username = self.cleaned_data['username']
        if User.objects.filter(username__iexact=username).exists():
            raise forms.ValidationError("Ce nom d'utilisateur existe déjà")
        return username

    def clean_email(self):
        email = self.cleaned_data['email']
        if User.objects.filter(email__iexact=email).exists():
            raise forms.ValidationError('Cette adresse email est déjà utilisée')
        return email

    def clean_mpesa_number(self):
        return _clean_mpesa_number(self.cleaned_data['mpesa_number'])

    def clean_role(self):
        value = self.cleaned_data.get('role') or Profile.CUSTOMER
        role = Profile.parse_role(value)
        # Les administrateurs ne peuvent pas s'inscrire eux-mêmes
        if role not in (Profile.CUSTOMER, Profile.VENDOR):
            raise forms.ValidationError('Rôle invalide : choisissez Customer ou Vendor')
        return role


class LoginForm(forms.Form):
    username = forms.CharField(max_length=254)
    password = forms.CharField()


class ProfileForm(forms.ModelForm):
    email = forms.EmailField(required=False)

    class Meta:
        model = Profile
        fields = ('mpesa_number', 'location', 'address')

    def clean_mpesa_number(self):
        return _clean_mpesa_number(self.cleaned_data.get('mpesa_number'))

    def clean_email(self):
        email = self.cleaned_data.get('email')
        if email and User.objects.filter(email__iexact=email).exclude(pk=self.instance.user_id).exists():
            raise forms.ValidationError('Cette adresse email est déjà utilisée')
        return email


class VendorReportForm(forms.ModelForm):

    class Meta:
        model = VendorReport
        fields = ('vendor', 'product', 'report_type', 'description')

    def clean_vendor(self):
        vendor = self.cleaned_data['vendor']
        if not Profile.objects.filter(user=vendor, role=Profile.VENDOR).exists():
            raise forms.ValidationError("L'utilisateur signalé n'est pas un vendeur")
        return vendor

    def clean(self):
        cd = super().clean()
        product = cd.get('product')
        vendor = cd.get('vendor')
        if product and vendor and product.vendor_id != vendor.id:
            raise forms.ValidationError("Ce produit n'appartient pas à ce vendeur")
        return cd


class ReportStatusForm(forms.ModelForm):

    class Meta:
        model = VendorReport
        fields = ('status', 'admin_notes')


class MessageForm(forms.ModelForm):

    class Meta:
        model = Message
        fields = ('receiver', 'content')

    def clean_content(self):
        content = self.cleaned_data['content'].strip()
        if not content:
            raise forms.ValidationError('Le message ne peut pas être vide')
        return content


class VerificationDocumentForm(forms.ModelForm):

    class Meta:
        model = Profile
        fields = ('verification_document',)

    def clean_verification_document(self):
        document = self.cleaned_data.get('verification_document')
        if not document or 'verification_document' not in self.files:
            raise forms.ValidationError('Aucune pièce justificative reçue')
        if document.size > settings.VERIFICATION_DOCUMENT_MAX_SIZE:
            raise forms.ValidationError('La pièce justificative ne doit pas dépasser 5 Mo')
        return document
