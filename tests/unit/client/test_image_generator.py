import pytest

from naya_daur.client.images import (
    ImageGenerator,
    build_image_payload,
    extract_image_uris,
    generate_images,
)
from naya_daur.exceptions import APIError, ImageGenerationError

from tests.fixtures.api_responses import error_response, image_response


@pytest.mark.unit
class TestImagePayload:
    def test_payload_shape(self):
        assert build_image_payload("a scooter at dusk", 3) == {
            "instances": [{"prompt": "a scooter at dusk"}],
            "parameters": {"sampleCount": 3},
        }

    def test_uris_from_predictions(self):
        body = {"predictions": [{"bytesBase64Encoded": "AAA"}, {"other": 1}]}
        assert extract_image_uris(body) == ["data:image/png;base64,AAA"]

    @pytest.mark.parametrize("body", [{}, {"predictions": None}, [], None])
    def test_no_predictions(self, body):
        assert extract_image_uris(body) == []


@pytest.mark.unit
class TestImageGenerator:
    @pytest.mark.asyncio
    async def test_generate_uses_configured_model_and_count(
        self, mock_api_key, frozen_config, scripted_client
    ):
        client, transport = scripted_client(image_response("AAA", "BBB"))
        generator = ImageGenerator(mock_api_key, config=frozen_config, client=client)

        images = await generator.generate("prompt")

        assert images == [
            "data:image/png;base64,AAA",
            "data:image/png;base64,BBB",
        ]
        request = transport.requests[0]
        assert request.url.path.endswith(f"/models/{frozen_config.image_model}:predict")
        assert request.url.params["key"] == mock_api_key
        assert transport.bodies[0]["parameters"] == {
            "sampleCount": frozen_config.image_sample_count
        }

    @pytest.mark.asyncio
    async def test_explicit_sample_count(
        self, mock_api_key, frozen_config, scripted_client
    ):
        client, transport = scripted_client(image_response("AAA"))
        generator = ImageGenerator(mock_api_key, config=frozen_config, client=client)

        await generator.generate("prompt", sample_count=1)

        assert transport.bodies[0]["parameters"] == {"sampleCount": 1}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("sample_count", [0, -1, 5, 9])
    async def test_out_of_range_sample_count_rejected(
        self, mock_api_key, frozen_config, scripted_client, sample_count
    ):
        client, transport = scripted_client()
        generator = ImageGenerator(mock_api_key, config=frozen_config, client=client)

        with pytest.raises(ValueError, match="sample_count"):
            await generator.generate("prompt", sample_count=sample_count)

        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_maximum_sample_count_allowed(
        self, mock_api_key, frozen_config, scripted_client
    ):
        client, transport = scripted_client(image_response("A", "B", "C", "D"))
        generator = ImageGenerator(mock_api_key, config=frozen_config, client=client)

        images = await generator.generate("prompt", sample_count=4)

        assert len(images) == 4
        assert transport.bodies[0]["parameters"] == {"sampleCount": 4}

    @pytest.mark.asyncio
    async def test_empty_predictions_raise(
        self, mock_api_key, frozen_config, scripted_client
    ):
        client, _ = scripted_client(image_response())
        generator = ImageGenerator(mock_api_key, config=frozen_config, client=client)

        with pytest.raises(ImageGenerationError, match="No images returned"):
            await generator.generate("prompt")

    @pytest.mark.asyncio
    async def test_api_error_propagates(self, mock_api_key, scripted_client):
        client, transport = scripted_client(error_response(400, "Prompt blocked"))

        with pytest.raises(APIError, match="Prompt blocked"):
            await generate_images(mock_api_key, "prompt", client=client)

        assert len(transport.requests) == 1
