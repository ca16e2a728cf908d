"""
Outils partagés par les tests
"""
from django.contrib.auth.models import User

from accounts.models import Profile


def create_user(username, role=Profile.CUSTOMER, verified=False, **profile_fields):
    user = User.objects.create_user(
        username=username, email=f'{username}@example.com', password='motdepasse123')
    profile = user.profile
    profile.role = role
    profile.verified = verified
    profile.mpesa_number = profile_fields.pop('mpesa_number', '254712345678')
    for field, value in profile_fields.items():
        setattr(profile, field, value)
    profile.save()
    return User.objects.select_related('profile').get(pk=user.pk)


def stk_callback(checkout_request_id, result_code=0, amount=170, receipt='NLJ7RT61SV',
                 result_desc='The service request is processed successfully.'):
    callback = {
        'MerchantRequestID': '29115-34620561-1',
        'CheckoutRequestID': checkout_request_id,
        'ResultCode': result_code,
        'ResultDesc': result_desc,
    }
    if result_code == 0:
        callback['CallbackMetadata'] = {
            'Item': [
                {'Name': 'Amount', 'Value': amount},
                {'Name': 'MpesaReceiptNumber', 'Value': receipt},
                {'Name': 'Balance'},
                {'Name': 'TransactionDate', 'Value': 20191219102115},
                {'Name': 'PhoneNumber', 'Value': 254708374149},
            ]
        }
    return {'Body': {'stkCallback': callback}}
