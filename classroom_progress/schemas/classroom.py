from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

# Shapes of the Classroom REST resources, limited to the fields the dashboard reads.
# Aliases keep the upstream camelCase names on the way in and on the way out.


class ClassroomModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class Course(ClassroomModel):
    id: str
    name: str
    section: Optional[str] = None
    course_state: Optional[str] = Field(default=None, alias="courseState")
    alternate_link: Optional[str] = Field(default=None, alias="alternateLink")


class DueDate(ClassroomModel):
    year: Optional[int] = None
    month: Optional[int] = None
    day: Optional[int] = None


class TimeOfDay(ClassroomModel):
    hours: Optional[int] = None
    minutes: Optional[int] = None
    seconds: Optional[int] = None


class CourseWork(ClassroomModel):
    id: str
    title: Optional[str] = None
    due_date: Optional[DueDate] = Field(default=None, alias="dueDate")
    due_time: Optional[TimeOfDay] = Field(default=None, alias="dueTime")
    state: Optional[str] = None
    work_type: Optional[str] = Field(default=None, alias="workType")
    alternate_link: Optional[str] = Field(default=None, alias="alternateLink")


class StudentSubmission(ClassroomModel):
    id: str
    state: Optional[str] = None  # NEW | CREATED | TURNED_IN | RETURNED
    update_time: Optional[datetime] = Field(default=None, alias="updateTime")
    late: Optional[bool] = None
    alternate_link: Optional[str] = Field(default=None, alias="alternateLink")


class Announcement(ClassroomModel):
    id: str
    text: Optional[str] = None
    update_time: Optional[datetime] = Field(default=None, alias="updateTime")
    alternate_link: Optional[str] = Field(default=None, alias="alternateLink")
