from django import forms

from .models import Product, Review


class ProductForm(forms.ModelForm):

    class Meta:
        model = Product
        fields = ('name', 'price', 'category', 'description', 'quantity')

    def clean_name(self):
        name = self.cleaned_data['name'].strip()
        if not name:
            raise forms.ValidationError('Le nom du produit est obligatoire')
        return name


class ReviewForm(forms.ModelForm):

    class Meta:
        model = Review
        fields = ('product', 'rating', 'comment')
