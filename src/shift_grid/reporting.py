"""
Reporting and Export Module for the Shift Grid engine

Handles PDF, Excel, and CSV export of the day grid (slots by location),
the assigned-hours summary and the employees' forbidden hours.
"""

import pandas as pd
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer, PageBreak
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional
from xml.sax.saxutils import escape
import logging

from .data_manager import DataManager
from .hours import format_hours, hours_status
from .scheduler_logic import ShiftScheduler
from .time_model import format_time, slots_in_domain


class ReportGenerator:
    """Main class for generating reports and exports"""

    def __init__(self, data_manager: DataManager):
        self.data_manager = data_manager
        self.scheduler = ShiftScheduler(data_manager)
        self.styles = getSampleStyleSheet()
        self._setup_custom_styles()

    def _setup_custom_styles(self):
        """Setup custom report styles"""
        self.styles.add(ParagraphStyle(
            name='CustomTitle',
            parent=self.styles['Heading1'],
            fontSize=18,
            spaceAfter=20,
            alignment=1  # Center alignment
        ))

        self.styles.add(ParagraphStyle(
            name='CustomHeading',
            parent=self.styles['Heading2'],
            fontSize=14,
            spaceAfter=12
        ))

        self.styles.add(ParagraphStyle(
            name='GridCell',
            parent=self.styles['Normal'],
            fontSize=6,
            leading=7
        ))

    def _location_names(self, locations: Optional[List[str]] = None) -> List[str]:
        if locations is not None:
            return list(locations)
        return self.data_manager.location_names()

    def create_day_grid_dataframe(self, day: str, locations: Optional[List[str]] = None) -> pd.DataFrame:
        """One row per slot, one column per location, cells list who works there.

        Rows are indexed by the slot label (index name 'Time') so no location
        name can collide with the time column.
        """
        location_names = self._location_names(locations)
        data = []

        for slot in slots_in_domain():
            data.append([
                ', '.join(emp.name for emp in self.scheduler.working_employees(day, slot, location))
                for location in location_names
            ])

        index = pd.Index([slot.label for slot in slots_in_domain()], name='Time')
        return pd.DataFrame(data, index=index, columns=location_names)

    def create_hours_dataframe(self) -> pd.DataFrame:
        """Assigned versus expected hours for every employee"""
        data = []
        for employee in self.data_manager.get_employees():
            status = hours_status(self.data_manager.store, employee)
            data.append({
                'ID': employee.id,
                'Employee': employee.name,
                'Teams': ', '.join(employee.teams),
                'Expected_Hours': status.expected_hours,
                'Assigned_Hours': status.assigned_hours,
                'Deviation': status.deviation,
                'Status': status.label or 'Fully scheduled'
            })

        return pd.DataFrame(data, columns=['ID', 'Employee', 'Teams', 'Expected_Hours',
                                           'Assigned_Hours', 'Deviation', 'Status'])

    def create_forbidden_dataframe(self) -> pd.DataFrame:
        """Every forbidden interval of every employee"""
        data = []
        for employee in self.data_manager.get_employees():
            for interval in employee.forbidden_hours:
                data.append({
                    'Employee': employee.name,
                    'Day': interval.day,
                    'Start': format_time(interval.start),
                    'End': format_time(interval.end),
                    'Reason': interval.reason or ''
                })

        return pd.DataFrame(data, columns=['Employee', 'Day', 'Start', 'End', 'Reason'])

    def export_day_pdf(self, day: str, output_path: str,
                       locations: Optional[List[str]] = None) -> bool:
        """Export one day's grid and the hours summary to PDF"""
        try:
            doc = SimpleDocTemplate(
                output_path,
                pagesize=landscape(A4),
                rightMargin=0.4*inch,
                leftMargin=0.4*inch,
                topMargin=0.4*inch,
                bottomMargin=0.4*inch
            )

            story = []

            title = Paragraph(f"Shift Schedule - Day {day}", self.styles['CustomTitle'])
            story.append(title)
            story.append(Spacer(1, 10))

            story.append(self._create_grid_table(day, locations))

            story.append(PageBreak())
            story.append(Paragraph("Assigned Hours", self.styles['CustomHeading']))
            story.append(self._create_hours_table())

            doc.build(story)
            return True

        except Exception as e:
            logging.error(f"Error creating PDF: {e}", exc_info=True)
            return False

    def _create_grid_table(self, day: str, locations: Optional[List[str]] = None) -> Table:
        """Create the slot by location table for PDF"""
        grid_df = self.create_day_grid_dataframe(day, locations)
        header = ['Time'] + list(grid_df.columns)

        data = [[Paragraph(f"<b>{escape(name)}</b>", self.styles['GridCell']) for name in header]]
        for time_label, cells in zip(grid_df.index, grid_df.values.tolist()):
            data.append([time_label] + [Paragraph(escape(cell), self.styles['GridCell'])
                                        for cell in cells])

        available_width = landscape(A4)[0] - 0.8*inch - 0.6*inch
        location_width = available_width / max(len(header) - 1, 1)
        table = Table(data, colWidths=[0.6*inch] + [location_width] * (len(header) - 1), repeatRows=1)

        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), colors.grey),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
            ('ALIGN', (0, 0), (0, -1), 'CENTER'),
            ('FONTSIZE', (0, 1), (0, -1), 7),
            ('GRID', (0, 0), (-1, -1), 0.5, colors.black),
            ('VALIGN', (0, 0), (-1, -1), 'TOP'),
        ]))

        return table

    def _create_hours_table(self) -> Table:
        """Create hours summary table for PDF"""
        hours_df = self.create_hours_dataframe()
        data = [['Employee', 'Expected', 'Assigned', 'Status']]
        for _, row in hours_df.iterrows():
            data.append([
                row['Employee'],
                format_hours(row['Expected_Hours']),
                format_hours(row['Assigned_Hours']),
                row['Status']
            ])

        table = Table(data, colWidths=[2.5*inch, 1*inch, 1*inch, 2.5*inch])
        style = [
            ('BACKGROUND', (0, 0), (-1, 0), colors.lightgrey),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('GRID', (0, 0), (-1, -1), 1, colors.black),
            ('FONTSIZE', (0, 0), (-1, -1), 9),
        ]

        # Highlight employees still short of their target
        for index, (_, row) in enumerate(hours_df.iterrows(), start=1):
            if row['Assigned_Hours'] < row['Expected_Hours']:
                style.append(('BACKGROUND', (0, index), (-1, index), colors.lightyellow))
            else:
                style.append(('BACKGROUND', (0, index), (-1, index), colors.honeydew))

        table.setStyle(TableStyle(style))
        return table

    def export_schedule_excel(self, output_path: str, days: Optional[List[str]] = None) -> bool:
        """Export every day's grid plus hours and forbidden hours to Excel"""
        try:
            if days is None:
                days = self.data_manager.day_labels()

            with pd.ExcelWriter(output_path, engine='openpyxl') as writer:
                for day in days:
                    grid_df = self.create_day_grid_dataframe(day)
                    grid_df.to_excel(writer, sheet_name=f'Day {day}')

                hours_df = self.create_hours_dataframe()
                hours_df.to_excel(writer, sheet_name='Hours', index=False)

                forbidden_df = self.create_forbidden_dataframe()
                forbidden_df.to_excel(writer, sheet_name='Forbidden Hours', index=False)

                self._format_excel_worksheets(writer)

            return True

        except Exception as e:
            logging.error(f"Error exporting to Excel: {e}", exc_info=True)
            return False

    def _format_excel_worksheets(self, writer):
        """Format Excel worksheets"""
        from openpyxl.styles import PatternFill, Font

        header_fill = PatternFill(start_color="366092", end_color="366092", fill_type="solid")
        header_font = Font(color="FFFFFF", bold=True)

        for worksheet in writer.sheets.values():
            for cell in worksheet[1]:
                cell.fill = header_fill
                cell.font = header_font

            # Auto-adjust column widths
            for column in worksheet.columns:
                max_length = max(len(str(cell.value)) if cell.value is not None else 0 for cell in column)
                worksheet.column_dimensions[column[0].column_letter].width = min(max_length + 2, 50)

    def export_day_csv(self, day: str, output_path: str) -> bool:
        """Export one day's grid to CSV format"""
        try:
            grid_df = self.create_day_grid_dataframe(day)
            grid_df.to_csv(output_path)
            return True

        except Exception as e:
            logging.error(f"Error exporting to CSV: {e}", exc_info=True)
            return False


class ExportManager:
    """Manager class for handling all export operations"""

    def __init__(self, data_manager: DataManager):
        self.data_manager = data_manager
        self.report_generator = ReportGenerator(data_manager)

    def export_schedule(self, day: str, format_type: str, output_path: str) -> bool:
        """Export schedule in specified format"""
        if format_type.lower() == 'pdf':
            return self.report_generator.export_day_pdf(day, output_path)
        elif format_type.lower() == 'excel':
            return self.report_generator.export_schedule_excel(output_path)
        elif format_type.lower() == 'csv':
            return self.report_generator.export_day_csv(day, output_path)
        else:
            raise ValueError(f"Unsupported format: {format_type}")

    def get_default_filename(self, day: str, format_type: str) -> str:
        """Generate default filename for export"""
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        extension = 'xlsx' if format_type.lower() == 'excel' else format_type.lower()

        return f"shift_schedule_day{day}_{timestamp}.{extension}"

    def batch_export(self, day: str, output_dir: str,
                     formats: List[str] = None) -> Dict[str, bool]:
        """Export schedule in multiple formats"""
        if formats is None:
            formats = ['pdf', 'excel', 'csv']

        results = {}
        output_path = Path(output_dir)
        output_path.mkdir(parents=True, exist_ok=True)

        for format_type in formats:
            filename = self.get_default_filename(day, format_type)
            file_path = output_path / filename

            try:
                results[format_type] = self.export_schedule(day, format_type, str(file_path))
            except Exception as e:
                logging.error(f"Error exporting {format_type}: {e}", exc_info=True)
                results[format_type] = False

        return results
