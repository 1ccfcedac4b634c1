from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from deliveries.models import DeliveryRequest
from .helpers import assign, make_delivery, make_user


class DeliveryDeleteTests(APITestCase):
    def setUp(self):
        self.cust, self.cust_token = make_user("cust", "customer")
        self.other, self.other_token = make_user("cust2", "customer")
        self.driver, self.driver_token = make_user("drv", "driver")
        self.delivery = make_delivery(self.cust)
        self.url = reverse("delivery-detail", args=[self.delivery.id])

    def auth(self, token):
        self.client.credentials(HTTP_AUTHORIZATION=f"Token {token.key}")

    def test_delete_pending_by_owner_204(self):
        self.auth(self.cust_token)
        res = self.client.delete(self.url)
        self.assertEqual(res.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(DeliveryRequest.objects.filter(id=self.delivery.id).exists())

        res = self.client.delete(self.url)
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)

    def test_delete_after_claim_is_400(self):
        assign(self.delivery, self.driver)
        self.auth(self.cust_token)
        res = self.client.delete(self.url)
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["detail"], "Only Pending requests can be cancelled.")
        self.assertTrue(DeliveryRequest.objects.filter(id=self.delivery.id).exists())

    def test_other_customer_forbidden(self):
        self.auth(self.other_token)
        res = self.client.delete(self.url)
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)
        self.assertTrue(DeliveryRequest.objects.filter(id=self.delivery.id).exists())

    def test_driver_forbidden(self):
        self.auth(self.driver_token)
        res = self.client.delete(self.url)
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_unknown_404(self):
        self.auth(self.cust_token)
        res = self.client.delete(reverse("delivery-detail", args=[999999]))
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)

    def test_unauthenticated_401(self):
        res = self.client.delete(self.url)
        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)
