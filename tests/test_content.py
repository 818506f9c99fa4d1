from pesantren_hub.models import Ad, ContentCategory, GlobalContent


class TestCategories:

    async def test_create_rename_delete(self, facade, seed):
        created = await facade.save_content_category({"name": "Kajian"})
        renamed = await facade.save_content_category({"id": created.data["id"], "name": "Kajian Kitab"})

        listed = await facade.get_content_categories()
        assert renamed.data["id"] == created.data["id"]
        assert [c["name"] for c in listed.data] == ["Kajian Kitab"]

        deleted = await facade.delete_content_category(created.data["id"])
        assert deleted.data == {"id": created.data["id"]}
        assert await seed.count(ContentCategory) == 0

    async def test_delete_unknown(self, facade):
        result = await facade.delete_content_category("missing")
        assert result.message == "Kategori tidak ditemukan"


class TestGlobalContent:

    async def test_list_joins_pesantren_name(self, facade, seed, two_tenants):
        alfalah, _ = two_tenants
        await seed.add(
            GlobalContent(title="Adab Menuntut Ilmu", author="Redaksi", pesantren_id=None),
            GlobalContent(title="Profil Al-Falah", author="Humas", pesantren_id=alfalah),
        )

        platform = await facade.get_global_content_list({"query": "adab"})
        tenant = await facade.get_global_content_list({"query": "humas"})

        assert platform.data["data"][0]["pesantrenName"] == "Platform"
        assert tenant.data["data"][0]["pesantrenName"] == "Pondok Al-Falah"

    async def test_moderation(self, facade, seed, two_tenants):
        alfalah, _ = two_tenants
        first, second = await seed.add(
            GlobalContent(title="Kajian Subuh", pesantren_id=alfalah),
            GlobalContent(title="Berita Wisuda", pesantren_id=alfalah),
        )

        approved = await facade.approve_content(first.id)
        rejected = await facade.reject_content(second.id, "Foto tidak pantas")
        featured = await facade.set_featured_content(first.id, True)

        assert approved.data["status"] == "approved"
        assert rejected.data["status"] == "rejected"
        assert rejected.data["rejectionReason"] == "Foto tidak pantas"
        assert featured.data["featured"] is True
        assert featured.data["pesantrenName"] == "Pondok Al-Falah"

        pending = await facade.get_global_content_list({"status": "pending"})
        assert pending.data["pagination"]["totalItems"] == 0

    async def test_unknown_content(self, facade):
        result = await facade.approve_content("missing")
        assert result.message == "Konten tidak ditemukan"


class TestAds:

    async def test_crud(self, facade, seed, two_tenants):
        alfalah, _ = two_tenants
        created = await facade.add_ad(
            {
                "title": "Beasiswa Tahfidz",
                "type": "banner",
                "status": "active",
                "startDate": "2024-07-01",
                "endDate": "2024-07-31",
                "targetPesantrenIds": [alfalah],
            }
        )
        assert created.data["targetPesantrenIds"] == [alfalah]
        assert created.data["startDate"] == "2024-07-01"

        updated = await facade.update_ad(
            created.data["id"], {"title": "Beasiswa Tahfidz 2024", "status": "inactive"}
        )
        assert updated.data["title"] == "Beasiswa Tahfidz 2024"
        assert updated.data["targetPesantrenIds"] == []

        listed = await facade.get_ads_list({"query": "tahfidz"})
        assert listed.data["pagination"]["totalItems"] == 1

        await facade.delete_ad(created.data["id"])
        assert await seed.count(Ad) == 0

    async def test_delete_unknown(self, facade):
        result = await facade.delete_ad("missing")
        assert result.message == "Iklan tidak ditemukan"
