"""
Resume Service

Ownership-scoped CRUD over resumes plus merging of AI optimization
output back into a stored resume.

Usage:
    service = ResumeService(db)
    resume = service.create(user_id, {"template": "modern", "personalInfo": {...}})
    service.apply_optimization(resume["_id"], user_id, {"summary": "...", "skills": [...]})
"""

import logging
from typing import Any, Dict, List, Optional

from pymongo import DESCENDING, ReturnDocument
from pymongo.database import Database

from src.common.database import RESUMES
from src.common.error_handling import NotFoundError, OwnershipError
from src.common.utils import maybe_object_id, parse_object_id, utcnow

logger = logging.getLogger(__name__)

RESUME_NOT_FOUND = "Resume not found"
NOT_AUTHORIZED = "User not authorized"

# Top-level sections a PUT may replace
UPDATABLE_FIELDS = ("template", "personalInfo", "workExperience", "education", "skills", "suggestedSkills")


def owner_key(user_id: str) -> Any:
    """Value stored in a document's user field for this user id."""
    return maybe_object_id(user_id) or user_id


def build_resume(user_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
    """New resume document with list sections defaulted to empty."""
    now = utcnow()
    return {
        "user": owner_key(user_id),
        "template": data["template"],
        "personalInfo": data.get("personalInfo") or {},
        "workExperience": data.get("workExperience") or [],
        "education": data.get("education") or [],
        "skills": data.get("skills") or [],
        "suggestedSkills": data.get("suggestedSkills") or [],
        "jobKeywords": data.get("jobKeywords") or [],
        "createdAt": now,
        "updatedAt": now,
    }


def merge_optimization(resume: Dict[str, Any], optimization: Dict[str, Any]) -> Dict[str, Any]:
    """
    Compute the $set fields that apply optimization data to a resume.

    - summary replaces personalInfo.summary
    - skills not already on the resume (case-insensitive by name) are
      unioned into suggestedSkills, keeping first-seen order
    - experience/education entries {index, description} override that
      entry only when the index exists
    - a non-empty keywords list replaces jobKeywords

    Returns:
        Mapping of dotted field paths to new values (may be empty)
    """
    updates: Dict[str, Any] = {}

    summary = optimization.get("summary")
    if summary:
        updates["personalInfo.summary"] = summary

    skills = optimization.get("skills") or []
    if skills:
        existing = {
            str(skill.get("name", "")).lower()
            for skill in resume.get("skills") or []
            if isinstance(skill, dict)
        }
        merged: List[str] = list(dict.fromkeys(resume.get("suggestedSkills") or []))
        for skill in skills:
            if not isinstance(skill, str) or skill.lower() in existing:
                continue
            if skill not in merged:
                merged.append(skill)
        updates["suggestedSkills"] = merged

    for key, section, target_field in (
        ("experience", "workExperience", "optimizedDescription"),
        ("education", "education", "description"),
    ):
        entries = resume.get(section) or []
        for override in optimization.get(key) or []:
            if not isinstance(override, dict):
                continue
            index = override.get("index")
            description = override.get("description")
            if not isinstance(index, int) or isinstance(index, bool) or not description:
                continue
            if 0 <= index < len(entries):
                updates[f"{section}.{index}.{target_field}"] = description

    keywords = optimization.get("keywords") or []
    if keywords:
        updates["jobKeywords"] = list(keywords)

    return updates


class ResumeService:
    """
    Resume operations scoped to the requesting user.

    Collections used:
        - resumes: indexed on (user, updatedAt)
    """

    def __init__(self, db: Database):
        self.db = db
        self.resumes = db[RESUMES]

    def list_for_user(self, user_id: str) -> List[Dict[str, Any]]:
        """User's resumes, most recently updated first."""
        return list(self.resumes.find({"user": owner_key(user_id)}).sort("updatedAt", DESCENDING))

    def get_owned(
        self,
        resume_id: str,
        user_id: str,
        not_owner_message: str = NOT_AUTHORIZED,
    ) -> Dict[str, Any]:
        """
        Fetch a resume and verify the requester owns it.

        Raises:
            NotFoundError: Missing resume or malformed id
            OwnershipError: Resume belongs to someone else
        """
        oid = parse_object_id(resume_id, RESUME_NOT_FOUND)
        resume = self.resumes.find_one({"_id": oid})
        if not resume:
            raise NotFoundError(RESUME_NOT_FOUND)
        if str(resume.get("user")) != str(user_id):
            raise OwnershipError(not_owner_message)
        return resume

    def create(self, user_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        resume = build_resume(user_id, data)
        result = self.resumes.insert_one(resume)
        resume["_id"] = result.inserted_id
        logger.info(f"Created resume {result.inserted_id}")
        return resume

    def update(self, resume_id: str, user_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Replace the provided non-empty top-level sections and stamp updatedAt."""
        resume = self.get_owned(resume_id, user_id)

        updates = {field: data[field] for field in UPDATABLE_FIELDS if data.get(field)}
        updates["updatedAt"] = utcnow()

        return self.resumes.find_one_and_update(
            {"_id": resume["_id"]},
            {"$set": updates},
            return_document=ReturnDocument.AFTER,
        )

    def delete(self, resume_id: str, user_id: str) -> None:
        resume = self.get_owned(resume_id, user_id)
        self.resumes.delete_one({"_id": resume["_id"]})
        logger.info(f"Deleted resume {resume['_id']}")

    def apply_optimization(
        self,
        resume_id: str,
        user_id: str,
        optimization: Dict[str, Any],
    ) -> Dict[str, Any]:
        """Merge optimization data into a resume; see merge_optimization."""
        resume = self.get_owned(resume_id, user_id)

        updates = merge_optimization(resume, optimization)
        updates["updatedAt"] = utcnow()

        return self.resumes.find_one_and_update(
            {"_id": resume["_id"]},
            {"$set": updates},
            return_document=ReturnDocument.AFTER,
        )

    def find_for_user(self, user_id: str, projection: Optional[Dict[str, int]] = None) -> List[Dict[str, Any]]:
        """Every resume the user owns (unsorted)."""
        return list(self.resumes.find({"user": owner_key(user_id)}, projection))
