"""
Tests de opiniones de clientes, boletín y artículos por categoría
"""

import pytest

API = "/api/v1"
ADMIN = f"{API}/admin"

NEW_TESTIMONIAL = {
    "content": "Las macetas de autorriego funcionan de maravilla.",
    "rating": 4,
    "customer_name": "Ana R.",
}


class TestTestimonials:

    @pytest.mark.asyncio
    async def test_only_approved_are_public(self, client):
        data = (await client.get(f"{API}/testimonials")).json()

        assert [t["id"] for t in data] == [1]
        assert data[0]["customer_name"] == "Marta G."
        assert data[0]["approved"] is True

    @pytest.mark.asyncio
    async def test_new_testimonial_waits_for_approval(self, client, admin_headers):
        response = await client.post(f"{API}/testimonials", json=dict(NEW_TESTIMONIAL, approved=True))
        created = response.json()

        assert response.status_code == 201
        assert created["approved"] is False
        public_ids = [t["id"] for t in (await client.get(f"{API}/testimonials")).json()]
        assert created["id"] not in public_ids

        approved = await client.post(f"{ADMIN}/testimonials/{created['id']}/approve", headers=admin_headers)
        assert approved.status_code == 200
        assert approved.json()["approved"] is True

        public_ids = [t["id"] for t in (await client.get(f"{API}/testimonials")).json()]
        assert created["id"] in public_ids

    @pytest.mark.asyncio
    @pytest.mark.parametrize("rating", [0, 6])
    async def test_rating_out_of_range_is_422(self, client, rating):
        response = await client.post(f"{API}/testimonials", json=dict(NEW_TESTIMONIAL, rating=rating))
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_admin_lists_pending_and_deletes(self, client, admin_headers):
        data = (await client.get(f"{ADMIN}/testimonials", headers=admin_headers)).json()
        assert {t["id"] for t in data} == {1, 2}

        assert (await client.delete(f"{ADMIN}/testimonials/2", headers=admin_headers)).status_code == 204
        assert (await client.delete(f"{ADMIN}/testimonials/2", headers=admin_headers)).status_code == 404
        assert (await client.post(f"{ADMIN}/testimonials/2/approve", headers=admin_headers)).status_code == 404

    @pytest.mark.asyncio
    async def test_moderation_requires_token(self, client):
        assert (await client.get(f"{ADMIN}/testimonials")).status_code == 401
        assert (await client.post(f"{ADMIN}/testimonials/2/approve")).status_code == 401


class TestNewsletter:

    @pytest.mark.asyncio
    async def test_subscribe(self, client):
        response = await client.post(f"{API}/subscribe", json={"email": "Lucia@Ejemplo.com"})

        assert response.status_code == 201
        assert response.json()["email"] == "lucia@ejemplo.com"

    @pytest.mark.asyncio
    async def test_duplicate_email_is_409(self, client):
        assert (await client.post(f"{API}/subscribe", json={"email": "pablo@ejemplo.com"})).status_code == 201

        response = await client.post(f"{API}/subscribe", json={"email": "PABLO@ejemplo.com"})
        assert response.status_code == 409
        assert response.json()["detail"] == "Este correo ya está suscrito"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [{"email": "sin-arroba"}, {"email": ""}, {}])
    async def test_invalid_email_is_422(self, client, payload):
        assert (await client.post(f"{API}/subscribe", json=payload)).status_code == 422


class TestCategoryArticles:

    @pytest.mark.asyncio
    async def test_published_articles_of_category(self, client):
        data = (await client.get(f"{API}/categories/plantas-interior/articles")).json()

        assert [p["slug"] for p in data] == ["regar-monstera"]
        assert data[0]["category_id"] == 1

    @pytest.mark.asyncio
    async def test_category_without_articles(self, client):
        response = await client.get(f"{API}/categories/macetas/articles")
        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_unknown_category_is_404(self, client):
        response = await client.get(f"{API}/categories/cactus/articles")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_admin_assigns_category(self, client, admin_headers):
        moved = await client.put(f"{ADMIN}/blog/posts/1", json={"category_id": 2}, headers=admin_headers)
        assert moved.status_code == 200
        assert moved.json()["category_id"] == 2

        assert (await client.get(f"{API}/categories/plantas-interior/articles")).json() == []
        assert [p["id"] for p in (await client.get(f"{API}/categories/macetas/articles")).json()] == [1]

        bad = await client.put(f"{ADMIN}/blog/posts/1", json={"category_id": 99}, headers=admin_headers)
        assert bad.status_code == 400
