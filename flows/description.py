from flows import client
from flows.schemas import GenerateDescriptionInput, GenerateDescriptionOutput

DESCRIPTION_PROMPT = """You write short descriptions of beneficiaries for field workers.

Using the photo above and these details:
Location: {location}
Age Range: {age_range}
Gender: {gender}

write one or two sentences that help someone recognise this person quickly."""


def generate_beneficiary_description(payload):
    data = GenerateDescriptionInput.model_validate(payload)
    prompt = DESCRIPTION_PROMPT.format(
        location=data.location, age_range=data.age_range, gender=data.gender
    )
    return client.run_prompt(prompt, [("Photo:", data.photo_data_uri)], GenerateDescriptionOutput,
                             label="generate_description")
